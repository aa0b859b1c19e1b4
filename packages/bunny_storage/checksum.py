"""Incremental SHA-256 checksums over byte streams."""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import BinaryIO

DEFAULT_CHUNK_SIZE = 64 * 1024


def iter_chunks(
    source: BinaryIO | Iterable[bytes], *, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[bytes]:
    """Yield byte chunks from a readable object or an iterable of chunks."""
    read = getattr(source, "read", None)
    if callable(read):
        while True:
            chunk = read(chunk_size)
            if not chunk:
                return
            yield bytes(chunk)
    else:
        for chunk in source:
            yield bytes(chunk)


async def aiter_chunks(
    source: AsyncIterable[bytes] | BinaryIO | Iterable[bytes],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AsyncIterator[bytes]:
    """Yield byte chunks from an async iterable or any ``iter_chunks`` source.

    Reads from file-like sources run in a worker thread.
    """
    if isinstance(source, AsyncIterable):
        async for chunk in source:
            yield bytes(chunk)
        return
    read = getattr(source, "read", None)
    if not callable(read):
        for chunk in source:
            yield bytes(chunk)
        return
    while True:
        chunk = await asyncio.to_thread(read, chunk_size)
        if not chunk:
            return
        yield bytes(chunk)


def checksum_bytes(data: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of one in-memory buffer."""
    return hashlib.sha256(data).hexdigest()


def generate_checksum(
    source: BinaryIO | Iterable[bytes], *, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> str:
    """Consume ``source`` to completion and return its SHA-256 hex digest.

    Errors raised while reading propagate unchanged and no digest is produced.
    """
    digest = hashlib.sha256()
    for chunk in iter_chunks(source, chunk_size=chunk_size):
        digest.update(chunk)
    return digest.hexdigest()


async def agenerate_checksum(
    source: AsyncIterable[bytes] | BinaryIO | Iterable[bytes],
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Async variant of ``generate_checksum`` accepting async byte iterables."""
    digest = hashlib.sha256()
    async for chunk in aiter_chunks(source, chunk_size=chunk_size):
        digest.update(chunk)
    return digest.hexdigest()
