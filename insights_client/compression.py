"""Incremental deflate compression of text fragment streams.

The output is a zlib-wrapped deflate stream, the format HTTP calls
``Content-Encoding: deflate``. Fragments are compressed as they arrive, so
only zlib's bounded window and the compressed output are held in memory.
"""

from __future__ import annotations

import contextlib
import typing as typ
import zlib

if typ.TYPE_CHECKING:
    import collections.abc as cabc

DEFAULT_COMPRESSION_LEVEL = zlib.Z_DEFAULT_COMPRESSION
_MIN_LEVEL = zlib.Z_DEFAULT_COMPRESSION
_MAX_LEVEL = zlib.Z_BEST_COMPRESSION


def _validate_level(level: int) -> int:
    if not _MIN_LEVEL <= level <= _MAX_LEVEL:
        msg = f"compression level must be between {_MIN_LEVEL} and {_MAX_LEVEL}"
        raise ValueError(msg)
    return level


async def iter_deflate_chunks(
    fragments: cabc.AsyncGenerator[str, None],
    *,
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> cabc.AsyncIterator[bytes]:
    """Compress text fragments into deflate output chunks.

    Parameters
    ----------
    fragments
        Async generator of text fragments; it is closed when compression
        finishes, fails, or is abandoned.
    level
        zlib compression level, ``-1`` (default) or ``0`` to ``9``.

    Yields
    ------
    bytes
        Non-empty compressor output, ending with the final block.

    Notes
    -----
    The final block is only flushed once ``fragments`` is exhausted. If the
    fragment stream raises, the exception propagates and the partial stream
    is never terminated.

    """
    compressor = zlib.compressobj(_validate_level(level))
    async with contextlib.aclosing(fragments) as stream:
        async for fragment in stream:
            chunk = compressor.compress(fragment.encode("utf-8"))
            if chunk:
                yield chunk
    yield compressor.flush(zlib.Z_FINISH)


async def compress_fragments(
    fragments: cabc.AsyncGenerator[str, None],
    *,
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> bytes:
    """Return the complete deflate stream for ``fragments``."""
    payload = bytearray()
    async with contextlib.aclosing(
        iter_deflate_chunks(fragments, level=level)
    ) as chunks:
        async for chunk in chunks:
            payload += chunk
    return bytes(payload)


__all__ = [
    "DEFAULT_COMPRESSION_LEVEL",
    "compress_fragments",
    "iter_deflate_chunks",
]
