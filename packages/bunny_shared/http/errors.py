"""Failures raised by the shared httpx wrappers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpError(Exception):
    """One HTTP exchange that did not produce a usable response."""

    message: str
    method: str
    url: str

    def __str__(self) -> str:
        """Return the human-readable error message."""
        return self.message


@dataclass(frozen=True)
class HttpRequestError(HttpError):
    """No response arrived (connect, read, write or timeout failure)."""

    cause: Exception | None = None


@dataclass(frozen=True)
class HttpJsonDecodeError(HttpError):
    """A successful response carried a body that is not JSON."""

    status_code: int = 0
    body: str = ""
