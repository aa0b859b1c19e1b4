"""Request construction and response mapping shared by sync/async clients."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from packages.bunny_shared.http import HttpJsonDecodeError, decode_json
from packages.bunny_shared.logging import get_logger
from packages.bunny_shared.logging import fields
from packages.bunny_storage.errors import StorageDecodeError, map_status_error
from packages.bunny_storage.models import StorageObject

ACCESS_KEY_HEADER = "AccessKey"
CHECKSUM_HEADER = "Checksum"
CONTENT_TYPE_OVERRIDE_HEADER = "Override-Content-Type"

logger = get_logger("packages.bunny_storage")


def build_headers(
    *,
    access_key: str,
    checksum: str | None = None,
    content_type_override: str = "",
) -> dict[str, str]:
    """Return request headers for one storage call."""
    headers = {ACCESS_KEY_HEADER: access_key}
    if checksum:
        headers[CHECKSUM_HEADER] = checksum
    if content_type_override:
        headers[CONTENT_TYPE_OVERRIDE_HEADER] = content_type_override
    return headers


def request_options(timeout: float | None) -> dict[str, Any]:
    """Return per-call httpx options; omit timeout to keep the client default."""
    if timeout is None:
        return {}
    return {"timeout": timeout}


def raise_for_status(
    response: httpx.Response,
    *,
    operation: str,
    path: str,
    zone_name: str,
    checksum: str | None = None,
) -> None:
    """Raise the mapped storage error for a non-success response."""
    if response.is_success:
        return
    error = map_status_error(
        status_code=response.status_code,
        path=path,
        zone_name=zone_name,
        checksum=checksum,
    )
    logger.warning(
        "storage %s failed with HTTP %s",
        operation,
        response.status_code,
        extra={
            fields.STATUS_CODE: response.status_code,
            fields.ERROR_KIND: type(error).__name__,
        },
    )
    raise error


def decode_body(response: httpx.Response, *, path: str) -> Any:
    """Decode one successful JSON body as-is."""
    try:
        return decode_json(response)
    except HttpJsonDecodeError as exc:
        raise StorageDecodeError(
            message=f"Invalid JSON response for {path}",
            path=path,
            status_code=response.status_code,
        ) from exc


def decode_object(payload: Any, *, path: str) -> StorageObject:
    """Decode one storage object payload."""
    try:
        return StorageObject.model_validate(payload)
    except ValidationError as exc:
        raise StorageDecodeError(
            message=f"Unexpected storage object payload for {path}: {exc.error_count()} error(s)",
            path=path,
        ) from exc


def decode_objects(payload: Any, *, path: str) -> list[StorageObject]:
    """Decode one listing payload, preserving service order."""
    if not isinstance(payload, list):
        raise StorageDecodeError(
            message=f"Expected a JSON array listing for {path}",
            path=path,
        )
    return [decode_object(item, path=path) for item in payload]
