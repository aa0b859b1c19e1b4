"""Public BunnyCDN Edge Storage SDK interface."""

from packages.bunny_storage.async_client import AsyncBunnyStorageClient
from packages.bunny_storage.checksum import (
    agenerate_checksum,
    checksum_bytes,
    generate_checksum,
)
from packages.bunny_storage.client import BunnyStorageClient
from packages.bunny_storage.config import BunnyStorageConfig
from packages.bunny_storage.errors import (
    BunnyStorageError,
    StorageChecksumMismatchError,
    StorageDecodeError,
    StorageInvalidPathError,
    StorageNotFoundError,
    StorageRemoteError,
    StorageTransportError,
    StorageUnauthorizedError,
    StorageUnknownError,
    StorageValidationError,
    map_status_error,
)
from packages.bunny_storage.models import StorageObject
from packages.bunny_storage.paths import normalize_path
from packages.bunny_storage.regions import StorageRegion, resolve_base_address
from packages.bunny_storage.sources import ByteStreamSource, LocalPathSource
from packages.bunny_storage.streams import AsyncDownloadStream, DownloadStream

__all__ = [
    "AsyncBunnyStorageClient",
    "AsyncDownloadStream",
    "BunnyStorageClient",
    "BunnyStorageConfig",
    "BunnyStorageError",
    "ByteStreamSource",
    "DownloadStream",
    "LocalPathSource",
    "StorageChecksumMismatchError",
    "StorageDecodeError",
    "StorageInvalidPathError",
    "StorageNotFoundError",
    "StorageObject",
    "StorageRegion",
    "StorageRemoteError",
    "StorageTransportError",
    "StorageUnauthorizedError",
    "StorageUnknownError",
    "StorageValidationError",
    "agenerate_checksum",
    "checksum_bytes",
    "generate_checksum",
    "map_status_error",
    "normalize_path",
    "resolve_base_address",
]
