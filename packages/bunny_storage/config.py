"""Runtime configuration primitives for storage SDK clients."""

from __future__ import annotations

from dataclasses import dataclass, field

from packages.bunny_shared.config import (
    DEFAULT_REGION,
    DEFAULT_TIMEOUT_SECONDS,
    StorageSettings,
)
from packages.bunny_storage.errors import StorageValidationError
from packages.bunny_storage.regions import StorageRegion, resolve_base_address


@dataclass(frozen=True, slots=True)
class BunnyStorageConfig:
    """Immutable zone, credential and endpoint settings for one client."""

    zone_name: str
    access_key: str = field(repr=False)
    region: str = DEFAULT_REGION
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    base_address: str = field(init=False)

    def __post_init__(self) -> None:
        if self.zone_name.strip() == "":
            raise StorageValidationError(message="zone_name is required")
        if self.access_key.strip() == "":
            raise StorageValidationError(message="access_key is required")
        if self.timeout_seconds <= 0:
            raise StorageValidationError(message="timeout_seconds must be positive")
        region = (
            self.region.value if isinstance(self.region, StorageRegion) else self.region
        )
        object.__setattr__(self, "region", region)
        object.__setattr__(self, "base_address", resolve_base_address(region))

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> BunnyStorageConfig:
        """Build one client configuration from resolved runtime settings."""
        storage = settings.storage
        return cls(
            zone_name=storage.zone_name,
            access_key=storage.access_key,
            region=storage.region,
            timeout_seconds=storage.timeout_seconds,
        )
