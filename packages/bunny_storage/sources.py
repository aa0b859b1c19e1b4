"""Upload input variants resolved before any request is built."""

from __future__ import annotations

import os
from collections.abc import AsyncIterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

from packages.bunny_storage.errors import StorageValidationError


@dataclass(frozen=True, slots=True)
class LocalPathSource:
    """Upload bytes read from a local file."""

    path: Path

    def open(self) -> BinaryIO:
        """Open the local file for binary reading."""
        try:
            return self.path.open("rb")
        except OSError as exc:
            raise StorageValidationError(
                message=f"Unable to open upload source {self.path}: {exc}"
            ) from exc


@dataclass(frozen=True, slots=True)
class ByteStreamSource:
    """Upload bytes read from a caller-owned live stream."""

    stream: Any


UploadSource = LocalPathSource | ByteStreamSource


def resolve_upload_source(value: Any, *, allow_async: bool = False) -> UploadSource:
    """Classify one upload input as a local path or a byte stream.

    Raises:
        StorageValidationError: For any other input kind.
    """
    if isinstance(value, (LocalPathSource, ByteStreamSource)):
        return value
    if isinstance(value, (str, os.PathLike)):
        return LocalPathSource(path=Path(value))
    if callable(getattr(value, "read", None)):
        return ByteStreamSource(stream=value)
    if allow_async and isinstance(value, AsyncIterable):
        return ByteStreamSource(stream=value)
    raise StorageValidationError(
        message=f"Invalid input type for upload: {type(value).__name__}"
    )
