"""Connection settings for an Insights source."""

from __future__ import annotations

import dataclasses
import os

from insights_client.errors import InsightsConfigError

BASE_URL_ENV = "INSIGHTS_BASE_URL"
SOURCE_ID_ENV = "INSIGHTS_SOURCE_ID"
SOURCE_TOKEN_ENV = "INSIGHTS_SOURCE_TOKEN"  # noqa: S105 - variable name


def _required_env(name: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        raise InsightsConfigError.missing_env(name)
    return raw.strip()


@dataclasses.dataclass(frozen=True, slots=True)
class InsightsConfig:
    """Indicates how to connect and authenticate to an Insights server.

    Attributes
    ----------
    base_url
        Base URL of the Insights API, e.g. ``https://example.test/api``.
    source_id
        Numeric identifier of the source receiving imports and logs.
    source_token
        Secret token issued for the source.

    """

    base_url: str
    source_id: int
    source_token: str

    @property
    def username(self) -> str:
        """Return the Basic auth username derived from the source id."""
        return str(self.source_id)

    @classmethod
    def from_env(cls) -> InsightsConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``INSIGHTS_BASE_URL``: Required API base URL
        - ``INSIGHTS_SOURCE_ID``: Required integer source identifier
        - ``INSIGHTS_SOURCE_TOKEN``: Required source token

        Raises
        ------
        InsightsConfigError
            If any variable is missing, empty, or the source id is not an
            integer.

        """
        base_url = _required_env(BASE_URL_ENV)
        raw_source_id = _required_env(SOURCE_ID_ENV)
        try:
            source_id = int(raw_source_id)
        except ValueError as exc:
            raise InsightsConfigError.invalid_source_id(raw_source_id) from exc
        source_token = _required_env(SOURCE_TOKEN_ENV)
        return cls(base_url=base_url, source_id=source_id, source_token=source_token)
