"""Unit tests for incremental deflate compression."""

from __future__ import annotations

import hashlib
import os
import typing as typ
import zlib

import msgspec
import pytest

from insights_client.compression import compress_fragments, iter_deflate_chunks
from insights_client.graph import assemble_graph
from insights_client.models import Entity, stream_item
from insights_client.serializer import encode_graph_document, iter_graph_fragments
from tests.unit.graph_helpers import (
    SourceFailedError,
    make_entity,
    make_relationship,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from insights_client.models import StreamItem

_LARGE_COUNT = 20_000


async def _fragments(
    texts: cabc.Iterable[str], *, closed: list[bool] | None = None
) -> cabc.AsyncGenerator[str, None]:
    try:
        for text in texts:
            yield text
    finally:
        if closed is not None:
            closed.append(True)


async def _failing_fragments(texts: list[str]) -> cabc.AsyncGenerator[str, None]:
    for text in texts:
        yield text
    raise SourceFailedError


@pytest.mark.asyncio
async def test_round_trip_matches_reference_document() -> None:
    """Decompressed output equals the non-streaming encoding of the graph."""
    entities = [make_entity("e1"), make_entity("e2")]
    relationships = [make_relationship("e1", "e2")]
    items = [stream_item(make_entity("e3"))]
    graph = assemble_graph(entities, relationships, items)

    payload = await compress_fragments(iter_graph_fragments(graph))

    assert zlib.decompress(payload) == encode_graph_document(
        entities, relationships, items
    )


@pytest.mark.asyncio
async def test_empty_graph_round_trips() -> None:
    """An empty graph still compresses into a complete stream."""
    payload = await compress_fragments(
        iter_graph_fragments(assemble_graph([], [], []))
    )

    assert zlib.decompress(payload) == (
        b'{"entities":[],"relationships":[],"streamItems":[]}'
    )


@pytest.mark.asyncio
async def test_chunks_concatenate_into_complete_stream() -> None:
    """Chunks are non-empty and end with the final block."""
    chunks = [
        chunk async for chunk in iter_deflate_chunks(_fragments(["ab", "cd", "ef"]))
    ]

    assert all(chunks)
    decompressor = zlib.decompressobj()
    assert decompressor.decompress(b"".join(chunks)) == b"abcdef"
    assert decompressor.eof


@pytest.mark.asyncio
async def test_non_ascii_text_is_utf8_encoded() -> None:
    """Fragments are compressed as UTF-8."""
    payload = await compress_fragments(_fragments(["caf", "é ☃"]))

    assert zlib.decompress(payload).decode("utf-8") == "café ☃"


@pytest.mark.asyncio
async def test_upstream_failure_skips_final_block() -> None:
    """A failing fragment stream propagates and leaves the stream unterminated."""
    chunks: list[bytes] = []

    with pytest.raises(SourceFailedError):
        async for chunk in iter_deflate_chunks(_failing_fragments(["abc", "def"])):
            chunks.append(chunk)

    decompressor = zlib.decompressobj()
    decompressor.decompress(b"".join(chunks))
    assert not decompressor.eof


@pytest.mark.asyncio
async def test_abandoned_compression_closes_upstream() -> None:
    """Closing the chunk stream early closes the fragment generator."""
    closed: list[bool] = []
    noise = [os.urandom(1 << 16).hex() for _ in range(4)]
    chunks = iter_deflate_chunks(_fragments(noise, closed=closed), level=0)

    first = await anext(chunks)
    await chunks.aclose()

    assert first
    assert closed == [True]


@pytest.mark.asyncio
async def test_abandoned_pipeline_closes_entity_source() -> None:
    """Closing the chunk stream early finalises the caller's source generator."""
    closed: list[bool] = []
    noise = os.urandom(1 << 16).hex()

    async def _entities() -> cabc.AsyncGenerator[Entity, None]:
        try:
            index = 0
            while True:
                index += 1
                yield Entity(id=str(index), name=noise, type="user")
        finally:
            closed.append(True)

    graph = assemble_graph(_entities(), [], [])
    chunks = iter_deflate_chunks(iter_graph_fragments(graph), level=0)

    assert await anext(chunks)
    await chunks.aclose()

    assert closed == [True]


@pytest.mark.asyncio
async def test_completed_compression_closes_upstream() -> None:
    """The fragment generator is finalised after a successful run."""
    closed: list[bool] = []

    await compress_fragments(_fragments(["x"], closed=closed))

    assert closed == [True]


@pytest.mark.asyncio
@pytest.mark.parametrize("level", [-2, 10])
async def test_invalid_compression_level_is_rejected(level: int) -> None:
    """Levels outside zlib's range raise ValueError."""
    with pytest.raises(ValueError, match="compression level"):
        await compress_fragments(_fragments(["x"]), level=level)


@pytest.mark.asyncio
async def test_large_async_source_is_compressed_while_streaming() -> None:
    """Compressed output is produced before the stream item source is drained."""
    pulled = 0

    async def _items() -> cabc.AsyncIterator[StreamItem]:
        nonlocal pulled
        for index in range(_LARGE_COUNT):
            pulled += 1
            digest = hashlib.sha256(str(index).encode()).hexdigest()
            yield stream_item(Entity(id=str(index), name=digest, type="user"))

    pulled_at_chunk: list[int] = []
    largest_fragment = 0
    payload = bytearray()

    async def _tracked(
        fragments: cabc.AsyncIterator[str],
    ) -> cabc.AsyncGenerator[str, None]:
        nonlocal largest_fragment
        async for fragment in fragments:
            largest_fragment = max(largest_fragment, len(fragment))
            yield fragment

    graph = assemble_graph([], [], _items())
    async for chunk in iter_deflate_chunks(_tracked(iter_graph_fragments(graph))):
        pulled_at_chunk.append(pulled)
        payload += chunk

    document = msgspec.json.decode(zlib.decompress(bytes(payload)))
    assert len(document["streamItems"]) == _LARGE_COUNT
    assert pulled_at_chunk[0] < _LARGE_COUNT
    assert largest_fragment < 256
