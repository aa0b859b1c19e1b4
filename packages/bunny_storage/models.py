"""Domain entities decoded from storage API responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class StorageObject(BaseModel):
    """One remote file or directory entry in a storage zone."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    guid: str = Field(alias="Guid")
    user_id: str = Field(alias="UserId")
    date_created: datetime = Field(alias="DateCreated")
    last_changed: datetime = Field(alias="LastChanged")
    storage_zone_name: str = Field(alias="StorageZoneName")
    path: str = Field(alias="Path")
    object_name: str = Field(alias="ObjectName")
    length: int = Field(alias="Length")
    is_directory: bool = Field(alias="IsDirectory")
    server_id: int = Field(alias="ServerId")
    storage_zone_id: int = Field(alias="StorageZoneId")
    checksum: str | None = Field(default=None, alias="Checksum")
    content_type: str | None = Field(default=None, alias="ContentType")
    replicated_zones: str | None = Field(default=None, alias="ReplicatedZones")

    @property
    def full_path(self) -> str:
        """Return the directory path joined with the object name."""
        return self.path + self.object_name
