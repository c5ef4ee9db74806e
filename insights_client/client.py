"""HTTP transport for the Insights source API."""

from __future__ import annotations

import typing as typ

import httpx
import msgspec

from insights_client.errors import InsightsAPIError
from insights_client.logging import get_logger, log_debug

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import types

    from insights_client.config import InsightsConfig
    from insights_client.models import ConnectorLog

logger = get_logger(__name__)

_DEFAULT_TIMEOUT_S = 60.0
_USER_AGENT = "insights-client/0.1"

SNAPSHOT_HEADERS: typ.Final[dict[str, str]] = {
    "Content-Type": "application/json",
    "Content-Encoding": "deflate",
}
JSON_HEADERS: typ.Final[dict[str, str]] = {"Content-Type": "application/json"}


class InsightsClient:
    """Client for the source endpoints of an Insights server.

    Each method performs exactly one request and never retries. Requests are
    authenticated with HTTP Basic credentials: the source id as username and
    the source token as password.

    Parameters
    ----------
    config
        Server location and source credentials.
    http_client
        Optional ``httpx.AsyncClient``, mainly for tests. When omitted the
        instance creates and owns its own client.

    """

    def __init__(
        self,
        config: InsightsConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided source configuration."""
        self._config = config
        self._auth = httpx.BasicAuth(config.username, config.source_token)
        self._source_url = (
            f"{config.base_url.rstrip('/')}/sources/{config.source_id}"
        )
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=_DEFAULT_TIMEOUT_S,
            headers={"User-Agent": _USER_AGENT, "Accept": "application/json"},
        )

    @property
    def config(self) -> InsightsConfig:
        """Return the configuration used to build this client."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> InsightsClient:
        """Return the client for use in ``async with``."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Close owned resources on exit."""
        await self.aclose()

    async def reload_snapshot(self, payload: bytes) -> None:
        """Replace the source snapshot with a deflate-compressed import document.

        Raises
        ------
        InsightsAPIError
            If the request fails or the server does not answer with 2xx.

        """
        await self._post("/snapshots", content=payload, headers=SNAPSHOT_HEADERS)

    async def create_connector_logs(self, logs: cabc.Sequence[ConnectorLog]) -> None:
        """Append connector log records to the source.

        Raises
        ------
        InsightsAPIError
            If the request fails or the server does not answer with 2xx.

        """
        await self._post(
            "/connector-logs",
            content=msgspec.json.encode(list(logs)),
            headers=JSON_HEADERS,
        )

    async def _post(
        self, path: str, *, content: bytes, headers: dict[str, str]
    ) -> httpx.Response:
        url = f"{self._source_url}{path}"
        log_debug(logger, "POST %s (%d bytes)", url, len(content))
        try:
            response = await self._client.post(
                url,
                content=content,
                headers=headers,
                auth=self._auth,
            )
        except httpx.TimeoutException as exc:
            raise InsightsAPIError.timeout() from exc
        except httpx.RequestError as exc:
            raise InsightsAPIError.network_error(str(exc)) from exc
        if not response.is_success:
            raise InsightsAPIError.http_error(response.status_code)
        return response


__all__ = ["InsightsClient"]
