"""Canonical request paths scoped under a storage zone."""

from __future__ import annotations

import re

from packages.bunny_storage.errors import StorageValidationError

_LEADING_SLASHES = re.compile(r"^/+")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def normalize_path(path: str, *, zone_name: str, is_directory: bool = False) -> str:
    """Return the canonical request path for one zone-scoped storage path.

    Backslashes become forward slashes, leading slashes are dropped, and
    repeated slashes collapse into one. Directory paths always end with a
    single trailing slash.

    Raises:
        StorageValidationError: If the path does not start with ``{zone_name}/``.
    """
    normalized = path.strip().replace("\\", "/")
    normalized = _LEADING_SLASHES.sub("", normalized)
    if not normalized.startswith(f"{zone_name}/"):
        raise StorageValidationError(
            message=(
                "Path validation failed. "
                f"File path must begin with /{zone_name}/."
            )
        )
    if is_directory and not normalized.endswith("/"):
        normalized = f"{normalized}/"
    return _REPEATED_SLASHES.sub("/", normalized)
