"""Streaming JSON encoding of import graphs.

:func:`iter_graph_fragments` produces the import document as a sequence of
text fragments whose concatenation equals
``msgspec.json.encode(GraphDocument(...))`` for the same elements. Only one
element is encoded at a time, so the uncompressed document is never held in
memory.

Fragments carry their structural punctuation together with the next encoded
element, so nothing is emitted until the upstream source has produced that
element. When a source fails the generator re-raises its exception without
emitting the closing brackets; a truncated document is never made to look
complete.
"""

from __future__ import annotations

import contextlib
import typing as typ

import msgspec

from insights_client.graph import GRAPH_FIELDS
from insights_client.models import GraphDocument

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from insights_client.graph import Graph, GraphField
    from insights_client.models import Entity, Relationship, StreamItem

_WIRE_NAMES: dict[GraphField, str] = {
    "entities": "entities",
    "relationships": "relationships",
    "stream_items": "streamItems",
}


async def iter_graph_fragments(graph: Graph) -> cabc.AsyncGenerator[str, None]:
    """Yield the JSON import document for ``graph`` as text fragments.

    Parameters
    ----------
    graph
        Single-use graph; it is claimed on the first pull.

    Yields
    ------
    str
        Consecutive fragments of the document, in field order ``entities``,
        ``relationships``, ``streamItems``.

    Raises
    ------
    GraphConsumedError
        If ``graph`` was already serialised.

    """
    graph.claim()
    encoder = msgspec.json.Encoder()
    pending = "{"
    for index, name in enumerate(GRAPH_FIELDS):
        if index:
            pending += ","
        pending += f'"{_WIRE_NAMES[name]}":['
        separator = ""
        async with contextlib.aclosing(graph.iter_field(name)) as items:
            async for item in items:
                yield pending + separator + encoder.encode(item).decode("utf-8")
                pending = ""
                separator = ","
        pending += "]"
    yield pending + "}"


def encode_graph_document(
    entities: cabc.Iterable[Entity],
    relationships: cabc.Iterable[Relationship],
    stream_items: cabc.Iterable[StreamItem] = (),
) -> bytes:
    """Encode a fully materialised import document in one call."""
    document = GraphDocument(
        entities=tuple(entities),
        relationships=tuple(relationships),
        stream_items=tuple(stream_items),
    )
    return msgspec.json.encode(document)


__all__ = ["encode_graph_document", "iter_graph_fragments"]
