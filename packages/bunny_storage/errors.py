"""Error taxonomy and HTTP status mapping for storage operations."""

from __future__ import annotations

from dataclasses import dataclass

from packages.bunny_shared.http import HttpRequestError


@dataclass(frozen=True)
class BunnyStorageError(Exception):
    """Base error type for storage SDK failures."""

    message: str

    def __str__(self) -> str:
        """Return human-readable error message."""
        return self.message


@dataclass(frozen=True)
class StorageValidationError(BunnyStorageError):
    """Local input rejected before any request was issued."""


@dataclass(frozen=True)
class StorageRemoteError(BunnyStorageError):
    """Storage API answered with a non-success status."""

    path: str = ""
    zone_name: str = ""
    status_code: int = 0


@dataclass(frozen=True)
class StorageNotFoundError(StorageRemoteError):
    """Requested object does not exist."""


@dataclass(frozen=True)
class StorageUnauthorizedError(StorageRemoteError):
    """Access key was rejected for the storage zone."""


@dataclass(frozen=True)
class StorageInvalidPathError(StorageRemoteError):
    """Storage API rejected the request path or payload."""


@dataclass(frozen=True)
class StorageChecksumMismatchError(StorageRemoteError):
    """Uploaded bytes did not match the supplied SHA-256 checksum."""

    checksum: str = ""


@dataclass(frozen=True)
class StorageUnknownError(StorageRemoteError):
    """Any other non-success status."""


@dataclass(frozen=True)
class StorageDecodeError(BunnyStorageError):
    """Successful response body could not be decoded."""

    path: str = ""
    status_code: int = 0


@dataclass(frozen=True)
class StorageTransportError(BunnyStorageError):
    """Network-level failure before a response was received."""

    method: str = ""
    url: str = ""
    cause: Exception | None = None


def map_status_error(
    *,
    status_code: int,
    path: str,
    zone_name: str,
    checksum: str | None = None,
) -> StorageRemoteError:
    """Map one non-success status code into a typed storage error."""
    if status_code == 404:
        return StorageNotFoundError(
            message=f"File not found: {path}",
            path=path,
            zone_name=zone_name,
            status_code=status_code,
        )
    if status_code == 400 and checksum:
        return StorageChecksumMismatchError(
            message=f"Checksum mismatch for {path}",
            path=path,
            zone_name=zone_name,
            status_code=status_code,
            checksum=checksum,
        )
    if status_code == 400:
        return StorageInvalidPathError(
            message=f"Invalid path specified: {path}",
            path=path,
            zone_name=zone_name,
            status_code=status_code,
        )
    if status_code == 401:
        return StorageUnauthorizedError(
            message=f"Unauthorized access to storage zone: {zone_name}",
            path=path,
            zone_name=zone_name,
            status_code=status_code,
        )
    return StorageUnknownError(
        message=f"An unknown error has occurred during the request (HTTP {status_code}): {path}",
        path=path,
        zone_name=zone_name,
        status_code=status_code,
    )


def map_transport_error(error: HttpRequestError) -> StorageTransportError:
    """Map one shared-layer transport failure into a typed SDK error."""
    cause = error.cause if error.cause is not None else error
    return StorageTransportError(
        message=f"{error.message}: {cause}",
        method=error.method,
        url=error.url,
        cause=cause,
    )


def map_interrupted_read(cause: Exception, *, path: str, url: str) -> StorageTransportError:
    """Map a failure while reading a response body into a transport error."""
    return map_transport_error(
        HttpRequestError(
            message=f"Download interrupted for {path}",
            method="GET",
            url=url,
            cause=cause,
        )
    )
