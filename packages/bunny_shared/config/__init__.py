"""Public API for shared storage configuration utilities."""

from .models import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_REGION,
    DEFAULT_TIMEOUT_SECONDS,
    LoggingSettings,
    StorageSettings,
    StorageZoneSettings,
    load_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_REGION",
    "DEFAULT_TIMEOUT_SECONDS",
    "LoggingSettings",
    "StorageSettings",
    "StorageZoneSettings",
    "load_settings",
]
