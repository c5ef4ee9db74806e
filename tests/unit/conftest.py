"""Shared fixtures for Insights client unit tests."""

from __future__ import annotations

import dataclasses
import datetime as dt
import typing as typ

import httpx
import pytest
import pytest_asyncio

from insights_client.config import InsightsConfig

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SOURCE_ID = 7
SOURCE_TOKEN = "source-token"  # noqa: S105 - test credential
BASE_URL = "https://insights.example.test/api"
FIXED_NOW = dt.datetime(2024, 1, 2, 3, 4, 5, tzinfo=dt.UTC)


@dataclasses.dataclass(slots=True)
class RecordedRequests:
    """Requests observed by the mock transport and the status it returns."""

    requests: list[httpx.Request] = dataclasses.field(default_factory=list)
    status_code: int = 204


@pytest.fixture
def insights_config() -> InsightsConfig:
    """Return configuration for the mock Insights server."""
    return InsightsConfig(
        base_url=BASE_URL, source_id=SOURCE_ID, source_token=SOURCE_TOKEN
    )


@pytest.fixture
def recorded() -> RecordedRequests:
    """Return the request log shared with ``mock_http_client``."""
    return RecordedRequests()


@pytest_asyncio.fixture
async def mock_http_client(
    recorded: RecordedRequests,
) -> cabc.AsyncIterator[httpx.AsyncClient]:
    """Yield an httpx client whose transport records every request."""

    def _handler(request: httpx.Request) -> httpx.Response:
        recorded.requests.append(request)
        return httpx.Response(status_code=recorded.status_code)

    client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    try:
        yield client
    finally:
        await client.aclose()
