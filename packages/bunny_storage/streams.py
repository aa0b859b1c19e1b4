"""Download stream handles and atomic local file writes."""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator, Iterator
from contextlib import contextmanager
from pathlib import Path
from tempfile import NamedTemporaryFile
from types import TracebackType
from typing import BinaryIO

import httpx

from packages.bunny_storage.errors import map_interrupted_read


class DownloadStream:
    """Live response body of one download; close it when done.

    Network failures while reading raise ``StorageTransportError``.
    """

    def __init__(self, response: httpx.Response, *, path: str) -> None:
        self._response = response
        self._path = path

    @property
    def content_type(self) -> str | None:
        return self._response.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        value = self._response.headers.get("content-length")
        return int(value) if value is not None and value.isdigit() else None

    def iter_bytes(self, chunk_size: int | None = None) -> Iterator[bytes]:
        """Yield body chunks as they arrive."""
        try:
            yield from self._response.iter_bytes(chunk_size)
        except httpx.TransportError as exc:
            raise self._interrupted(exc) from exc

    def __iter__(self) -> Iterator[bytes]:
        return self.iter_bytes()

    def read(self) -> bytes:
        """Read the remaining body into memory."""
        try:
            return self._response.read()
        except httpx.TransportError as exc:
            raise self._interrupted(exc) from exc

    def close(self) -> None:
        """Release the underlying connection."""
        self._response.close()

    def _interrupted(self, exc: httpx.TransportError) -> Exception:
        return map_interrupted_read(
            exc, path=self._path, url=str(self._response.request.url)
        )

    def __enter__(self) -> DownloadStream:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


class AsyncDownloadStream:
    """Async counterpart of ``DownloadStream``."""

    def __init__(self, response: httpx.Response, *, path: str) -> None:
        self._response = response
        self._path = path

    @property
    def content_type(self) -> str | None:
        return self._response.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        value = self._response.headers.get("content-length")
        return int(value) if value is not None and value.isdigit() else None

    async def aiter_bytes(self, chunk_size: int | None = None) -> AsyncIterator[bytes]:
        """Yield body chunks as they arrive."""
        try:
            async for chunk in self._response.aiter_bytes(chunk_size):
                yield chunk
        except httpx.TransportError as exc:
            raise self._interrupted(exc) from exc

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.aiter_bytes()

    async def aread(self) -> bytes:
        """Read the remaining body into memory."""
        try:
            return await self._response.aread()
        except httpx.TransportError as exc:
            raise self._interrupted(exc) from exc

    async def aclose(self) -> None:
        """Release the underlying connection."""
        await self._response.aclose()

    def _interrupted(self, exc: httpx.TransportError) -> Exception:
        return map_interrupted_read(
            exc, path=self._path, url=str(self._response.request.url)
        )

    async def __aenter__(self) -> AsyncDownloadStream:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()


@contextmanager
def atomic_write(target: Path) -> Iterator[BinaryIO]:
    """Yield a temp file beside ``target`` and move it into place on success.

    If the block raises, the temp file is removed and ``target`` is untouched.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            prefix=f".{target.name}-",
            suffix=".part",
            dir=target.parent,
            delete=False,
        ) as handle:
            tmp_path = Path(handle.name)
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, target)
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


class AsyncAtomicWrite:
    """``atomic_write`` with every file operation run in a worker thread."""

    def __init__(self, target: Path) -> None:
        self._manager = atomic_write(target)
        self._handle: BinaryIO | None = None

    async def __aenter__(self) -> AsyncAtomicWrite:
        self._handle = await asyncio.to_thread(self._manager.__enter__)
        return self

    async def write(self, chunk: bytes) -> None:
        """Append one chunk to the temp file."""
        if self._handle is None:
            raise RuntimeError("AsyncAtomicWrite used outside 'async with'")
        await asyncio.to_thread(self._handle.write, chunk)

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        return await asyncio.to_thread(self._manager.__exit__, exc_type, exc, tb)
