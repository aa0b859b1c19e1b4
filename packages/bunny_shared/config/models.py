"""Typed configuration models for storage runtime settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "bunny" / "storage.yaml"
DEFAULT_REGION = "de"
DEFAULT_TIMEOUT_SECONDS = 30.0


class LoggingSettings(BaseModel):
    """Structured logging configuration shared by the SDK and CLI."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    json_output: bool = False
    service: str = "bunny-storage"
    environment: str = "dev"


class StorageZoneSettings(BaseModel):
    """Connection settings for one storage zone."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    zone_name: str = ""
    access_key: str = ""
    region: str = DEFAULT_REGION
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    @field_validator("zone_name", "access_key", "region")
    @classmethod
    def _strip(cls, value: str) -> str:
        """Drop surrounding whitespace from string settings."""
        return value.strip()


class StorageSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="BUNNY_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
        yaml_file=DEFAULT_CONFIG_PATH,
        yaml_file_encoding="utf-8",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    storage: StorageZoneSettings = Field(default_factory=StorageZoneSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply precedence: init > env > yaml > defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
        )


def load_settings(
    *, config_path: str | Path | None = None, **values: Any
) -> StorageSettings:
    """Load settings, optionally reading YAML from an explicit path."""
    if config_path is None:
        return StorageSettings(**values)

    class _FileStorageSettings(StorageSettings):
        model_config = SettingsConfigDict(yaml_file=Path(config_path))

    return _FileStorageSettings(**values)
