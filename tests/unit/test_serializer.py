"""Unit tests for streaming import document encoding."""

from __future__ import annotations

import asyncio
import typing as typ

import msgspec
import pytest

from insights_client.errors import GraphConsumedError
from insights_client.graph import assemble_graph
from insights_client.models import stream_item
from insights_client.serializer import encode_graph_document, iter_graph_fragments
from tests.unit.graph_helpers import (
    SourceFailedError,
    async_items,
    failing_after,
    make_entity,
    make_relationship,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from insights_client.graph import Graph
    from insights_client.models import Entity


async def _collect(graph: Graph) -> list[str]:
    return [fragment async for fragment in iter_graph_fragments(graph)]


@pytest.mark.asyncio
async def test_fragments_match_non_streaming_encoding() -> None:
    """Joined fragments equal the one-shot msgspec encoding byte for byte."""
    entities = [make_entity("e1"), make_entity("e2", entity_type="group")]
    relationships = [make_relationship("e1", "e2")]
    items = [
        stream_item(make_entity("e3")),
        stream_item(make_relationship("e3", "e2")),
    ]

    fragments = await _collect(assemble_graph(entities, relationships, items))

    expected = encode_graph_document(entities, relationships, items)
    assert "".join(fragments).encode("utf-8") == expected


@pytest.mark.asyncio
async def test_async_sources_encode_like_sync_sources() -> None:
    """Async sources produce the same document as their list equivalents."""
    entities = [make_entity("e1"), make_entity("e2")]
    relationships = [make_relationship("e1", "e2")]
    items = [stream_item(make_entity("e9"))]

    fragments = await _collect(
        assemble_graph(
            async_items(entities), async_items(relationships), async_items(items)
        )
    )

    assert "".join(fragments).encode("utf-8") == encode_graph_document(
        entities, relationships, items
    )


@pytest.mark.asyncio
async def test_fragments_preserve_element_order() -> None:
    """Entities and stream items keep their source order."""
    e1, e2 = make_entity("e1"), make_entity("e2")
    s1, s2 = stream_item(make_entity("s1")), stream_item(make_entity("s2"))

    fragments = await _collect(assemble_graph([e1, e2], [], [s1, s2]))
    document = msgspec.json.decode("".join(fragments))

    assert [entity["id"] for entity in document["entities"]] == ["e1", "e2"]
    assert document["relationships"] == []
    assert [item["entity"]["id"] for item in document["streamItems"]] == [
        "s1",
        "s2",
    ]
    assert list(document) == ["entities", "relationships", "streamItems"]


@pytest.mark.asyncio
async def test_empty_graph_encodes_three_empty_arrays() -> None:
    """An empty graph is a single fragment with three empty arrays."""
    fragments = await _collect(assemble_graph([], [], []))

    assert fragments == ['{"entities":[],"relationships":[],"streamItems":[]}']


@pytest.mark.asyncio
async def test_one_fragment_per_element_plus_closing() -> None:
    """Each element arrives in its own fragment with its leading punctuation."""
    fragments = await _collect(
        assemble_graph([make_entity("e1"), make_entity("e2")], [], [])
    )

    assert len(fragments) == 3
    assert fragments[0].startswith('{"entities":[{')
    assert fragments[1].startswith(',{"id":"e2"')
    assert fragments[2] == '],"relationships":[],"streamItems":[]}'


@pytest.mark.asyncio
async def test_no_fragment_before_first_element_arrives() -> None:
    """Nothing is emitted while the first source is still waiting."""
    release = asyncio.Event()

    async def _entities() -> cabc.AsyncIterator[Entity]:
        await release.wait()
        yield make_entity("e1")

    fragments = iter_graph_fragments(assemble_graph(_entities(), [], []))
    pending = asyncio.ensure_future(anext(fragments))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert not pending.done()
    release.set()
    first = await pending
    assert first.startswith('{"entities":[{"id":"e1"')
    await fragments.aclose()


@pytest.mark.asyncio
async def test_source_failure_propagates_without_closing_fragment() -> None:
    """A failing source ends the stream with its own exception."""
    error = SourceFailedError("entity feed broke")
    graph = assemble_graph(
        failing_after([make_entity("e1")], error), [make_relationship("a", "b")], []
    )
    fragments: list[str] = []

    with pytest.raises(SourceFailedError) as exc_info:
        async for fragment in iter_graph_fragments(graph):
            fragments.append(fragment)

    assert exc_info.value is error
    entity_json = msgspec.json.encode(make_entity("e1")).decode("utf-8")
    assert fragments == ['{"entities":[' + entity_json]


@pytest.mark.asyncio
async def test_graph_cannot_be_serialised_twice() -> None:
    """A second serialisation of the same graph is refused."""
    graph = assemble_graph([make_entity("e1")], [], [])
    await _collect(graph)

    with pytest.raises(GraphConsumedError):
        await _collect(graph)


def test_encode_graph_document_uses_wire_field_names() -> None:
    """The reference encoder writes the three top-level arrays in order."""
    assert encode_graph_document([], []) == (
        b'{"entities":[],"relationships":[],"streamItems":[]}'
    )
