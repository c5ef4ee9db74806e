"""Client for uploading graph imports and connector logs to Insights.

Quick example::

    >>> import asyncio
    >>> from insights_client import Entity, InsightsConfig, perform_import
    >>> config = InsightsConfig(
    ...     base_url="https://example.test/api", source_id=1, source_token="t"
    ... )
    >>> entities = [Entity(id="1", name="Alice", type="user")]
    >>> asyncio.run(perform_import(config, entities, []))  # doctest: +SKIP

Sources may be lists, generators, or async iterables; they are serialised and
compressed incrementally and sent as one deflate-encoded request body.
"""

from __future__ import annotations

from .client import InsightsClient
from .config import InsightsConfig
from .errors import (
    GraphConsumedError,
    InsightsAPIError,
    InsightsConfigError,
    InsightsError,
)
from .graph import Graph, assemble_graph
from .importer import build_snapshot_payload, log_alert, log_info, perform_import
from .models import (
    AttributeAssignment,
    BooleanValue,
    ConnectorLog,
    ConnectorLogLevel,
    Date,
    DateTime,
    DateTimeValue,
    DateValue,
    Entity,
    EntityStreamItem,
    GraphDocument,
    NumberValue,
    Relationship,
    RelationshipStreamItem,
    StreamItem,
    StringValue,
    Time,
    TimeValue,
    Value,
    ValueType,
    stream_item,
    value_of,
)

__all__ = [
    "AttributeAssignment",
    "BooleanValue",
    "ConnectorLog",
    "ConnectorLogLevel",
    "Date",
    "DateTime",
    "DateTimeValue",
    "DateValue",
    "Entity",
    "EntityStreamItem",
    "Graph",
    "GraphConsumedError",
    "GraphDocument",
    "InsightsAPIError",
    "InsightsClient",
    "InsightsConfig",
    "InsightsConfigError",
    "InsightsError",
    "NumberValue",
    "Relationship",
    "RelationshipStreamItem",
    "StreamItem",
    "StringValue",
    "Time",
    "TimeValue",
    "Value",
    "ValueType",
    "assemble_graph",
    "build_snapshot_payload",
    "log_alert",
    "log_info",
    "perform_import",
    "stream_item",
    "value_of",
]
