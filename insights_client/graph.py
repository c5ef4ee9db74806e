"""Assemble entity, relationship, and stream item sources into one graph.

A :class:`Graph` is a structural adapter only: it neither copies, validates,
nor reorders elements, and it never iterates a source until the serializer
pulls from it. Each source may be an ordinary iterable (a list, a generator)
or an async iterable whose elements arrive over time.
"""

from __future__ import annotations

import collections.abc as cabc
import contextlib
import dataclasses
import typing as typ

from insights_client.errors import GraphConsumedError

if typ.TYPE_CHECKING:
    from insights_client.models import Entity, Relationship, StreamItem

T = typ.TypeVar("T")

Source: typ.TypeAlias = cabc.Iterable[T] | cabc.AsyncIterable[T]

GraphField = typ.Literal["entities", "relationships", "stream_items"]

# Serialisation order of the graph fields.
GRAPH_FIELDS: tuple[GraphField, ...] = ("entities", "relationships", "stream_items")


async def aiter_source(source: Source[T]) -> cabc.AsyncGenerator[T, None]:
    """Yield elements of a sync or async source in order.

    Async sources suspend the caller until the next element is available.
    Sync sources are iterated inline. Exceptions raised by the source
    propagate unchanged. Closing the returned generator also closes a
    generator source.
    """
    if isinstance(source, cabc.AsyncGenerator):
        async with contextlib.aclosing(source) as items:
            async for item in items:
                yield item
    elif isinstance(source, cabc.AsyncIterable):
        async for item in source:
            yield item
    elif isinstance(source, cabc.Generator):
        with contextlib.closing(source) as items:
            for item in items:
                yield item
    else:
        for item in source:
            yield item


@dataclasses.dataclass(slots=True)
class Graph:
    """Current snapshot plus incremental changes for a single upload.

    Attributes
    ----------
    entities
        Full snapshot of entities.
    relationships
        Full snapshot of relationships.
    stream_items
        Ordered incremental entity and relationship changes.

    """

    entities: Source[Entity]
    relationships: Source[Relationship]
    stream_items: Source[StreamItem]
    _consumed: bool = dataclasses.field(default=False, init=False, repr=False)

    @property
    def consumed(self) -> bool:
        """Return whether the graph has been handed to a consumer."""
        return self._consumed

    def claim(self) -> None:
        """Mark the graph as consumed.

        Raises
        ------
        GraphConsumedError
            If the graph was already claimed; sources are single-pass.

        """
        if self._consumed:
            raise GraphConsumedError.already_consumed()
        self._consumed = True

    def iter_field(self, name: GraphField) -> cabc.AsyncGenerator[typ.Any, None]:
        """Return an async generator over the named source."""
        source: Source[typ.Any] = getattr(self, name)
        return aiter_source(source)


def assemble_graph(
    entities: Source[Entity],
    relationships: Source[Relationship],
    stream_items: Source[StreamItem] = (),
) -> Graph:
    """Combine the three import sources into a single-use :class:`Graph`.

    No source is iterated here, so downstream work can start before any
    source is fully available.
    """
    return Graph(
        entities=entities,
        relationships=relationships,
        stream_items=stream_items,
    )


__all__ = [
    "GRAPH_FIELDS",
    "Graph",
    "GraphField",
    "Source",
    "aiter_source",
    "assemble_graph",
]
