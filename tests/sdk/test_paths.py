"""Unit tests for zone-scoped path normalization."""

from __future__ import annotations

import pytest

from packages.bunny_storage.errors import StorageValidationError
from packages.bunny_storage.paths import normalize_path

ZONE = "myzone"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("myzone/file.txt", "myzone/file.txt"),
        ("/myzone/file.txt", "myzone/file.txt"),
        ("///myzone/file.txt", "myzone/file.txt"),
        ("  myzone/dir/file.txt  ", "myzone/dir/file.txt"),
        ("\\myzone\\dir\\file.txt", "myzone/dir/file.txt"),
        ("myzone//dir///file.txt", "myzone/dir/file.txt"),
    ],
)
def test_file_paths_are_canonicalized(raw: str, expected: str) -> None:
    """File-mode normalization should clean separators without a trailing slash."""
    assert normalize_path(raw, zone_name=ZONE) == expected


@pytest.mark.parametrize(
    "raw",
    ["myzone/dir", "myzone/dir/", "/myzone//dir//", "myzone\\dir\\\\", "myzone/"],
)
def test_directory_paths_end_with_one_slash(raw: str) -> None:
    """Directory-mode normalization should end with exactly one slash."""
    normalized = normalize_path(raw, zone_name=ZONE, is_directory=True)

    assert normalized.endswith("/")
    assert not normalized.endswith("//")
    assert "//" not in normalized


@pytest.mark.parametrize(
    "raw",
    ["otherzone/file.txt", "file.txt", "myzone", "myzonex/file.txt", ""],
)
def test_paths_outside_zone_are_rejected(raw: str) -> None:
    """Paths not starting with ``{zone}/`` should fail validation."""
    with pytest.raises(StorageValidationError) as exc_info:
        normalize_path(raw, zone_name=ZONE)

    assert "/myzone/" in str(exc_info.value)


@pytest.mark.parametrize(
    ("raw", "is_directory"),
    [
        (" /myzone//a\\b//c.txt ", False),
        ("myzone///a", True),
        ("\\\\myzone\\x\\", True),
    ],
)
def test_normalization_is_idempotent(raw: str, is_directory: bool) -> None:
    """Normalizing an already-normalized path should not change it."""
    once = normalize_path(raw, zone_name=ZONE, is_directory=is_directory)
    twice = normalize_path(once, zone_name=ZONE, is_directory=is_directory)

    assert once == twice
