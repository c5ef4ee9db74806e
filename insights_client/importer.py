"""Import and connector log operations.

An import runs as a pull-based pipeline inside the calling task::

    sources -> Graph -> JSON text fragments -> deflate chunks -> payload

The compressed payload is assembled in memory and sent in a single request
only once every source has been exhausted, so a failing source means nothing
is sent and the source's own exception reaches the caller.
"""

from __future__ import annotations

import typing as typ

from insights_client.client import InsightsClient
from insights_client.clock import as_utc, utcnow
from insights_client.compression import DEFAULT_COMPRESSION_LEVEL, compress_fragments
from insights_client.graph import assemble_graph
from insights_client.models import ConnectorLog, ConnectorLogLevel
from insights_client.observability import ImportEventLogger, ImportRunContext
from insights_client.serializer import iter_graph_fragments

if typ.TYPE_CHECKING:
    import httpx

    from insights_client.clock import Clock
    from insights_client.config import InsightsConfig
    from insights_client.graph import Graph, Source
    from insights_client.models import Entity, Relationship, StreamItem

_events = ImportEventLogger()


async def build_snapshot_payload(
    graph: Graph,
    *,
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> bytes:
    """Serialise and compress ``graph`` into a snapshot request body.

    Raises
    ------
    GraphConsumedError
        If ``graph`` was already serialised.

    """
    return await compress_fragments(iter_graph_fragments(graph), level=level)


async def perform_import(  # noqa: PLR0913
    config: InsightsConfig,
    entities: Source[Entity],
    relationships: Source[Relationship],
    stream_items: Source[StreamItem] = (),
    *,
    http_client: httpx.AsyncClient | None = None,
    level: int = DEFAULT_COMPRESSION_LEVEL,
    clock: Clock = utcnow,
) -> None:
    """Send entities, relationships, and stream items to the Insights server.

    Parameters
    ----------
    config
        Server location and source credentials.
    entities, relationships, stream_items
        Import sources. Each may be a plain iterable or an async iterable and
        is consumed exactly once, in that order.
    http_client
        Optional ``httpx.AsyncClient`` used for the upload request.
    level
        zlib compression level.
    clock
        Source of timestamps for the structured log events.

    Raises
    ------
    InsightsAPIError
        If the upload request fails.
    Exception
        Whatever a source raises, unchanged; no request is made in that case.

    """
    graph = assemble_graph(entities, relationships, stream_items)
    context = ImportRunContext(source_id=config.source_id, started_at=clock())
    _events.log_import_started(context)
    try:
        payload = await build_snapshot_payload(graph, level=level)
        _events.log_payload_built(context, len(payload))
        async with InsightsClient(config, http_client=http_client) as client:
            await client.reload_snapshot(payload)
    except Exception as exc:
        _events.log_import_failed(context, exc, clock() - context.started_at)
        raise
    _events.log_import_completed(context, clock() - context.started_at)


async def _send_log(
    config: InsightsConfig,
    level: ConnectorLogLevel,
    message: str,
    *,
    clock: Clock,
    http_client: httpx.AsyncClient | None,
) -> None:
    record = ConnectorLog(level=level, message=message, timestamp=as_utc(clock()))
    async with InsightsClient(config, http_client=http_client) as client:
        await client.create_connector_logs([record])
    _events.log_connector_log_sent(config.source_id, level)


async def log_alert(
    config: InsightsConfig,
    message: str,
    *,
    clock: Clock = utcnow,
    http_client: httpx.AsyncClient | None = None,
) -> None:
    """Send a warning log to the Insights server."""
    await _send_log(
        config,
        ConnectorLogLevel.ALERT,
        message,
        clock=clock,
        http_client=http_client,
    )


async def log_info(
    config: InsightsConfig,
    message: str,
    *,
    clock: Clock = utcnow,
    http_client: httpx.AsyncClient | None = None,
) -> None:
    """Send an informational log to the Insights server."""
    await _send_log(
        config,
        ConnectorLogLevel.INFO,
        message,
        clock=clock,
        http_client=http_client,
    )


__all__ = ["build_snapshot_payload", "log_alert", "log_info", "perform_import"]
