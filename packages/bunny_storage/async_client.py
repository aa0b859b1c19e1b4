"""Asynchronous BunnyCDN Edge Storage client."""

from __future__ import annotations

import asyncio
import os
import time
from contextlib import ExitStack
from pathlib import Path
from typing import Any

import httpx

from packages.bunny_shared.config import DEFAULT_REGION, DEFAULT_TIMEOUT_SECONDS
from packages.bunny_shared.http import AsyncHttpClient, HttpRequestError
from packages.bunny_shared.logging import fields, log_context
from packages.bunny_storage.checksum import aiter_chunks, checksum_bytes
from packages.bunny_storage.config import BunnyStorageConfig
from packages.bunny_storage.errors import map_interrupted_read, map_transport_error
from packages.bunny_storage.models import StorageObject
from packages.bunny_storage.operations import (
    build_headers,
    decode_body,
    decode_object,
    decode_objects,
    logger,
    raise_for_status,
    request_options,
)
from packages.bunny_storage.paths import normalize_path
from packages.bunny_storage.sources import LocalPathSource, resolve_upload_source
from packages.bunny_storage.streams import AsyncAtomicWrite, AsyncDownloadStream


class AsyncBunnyStorageClient:
    """Coroutine-based counterpart of ``BunnyStorageClient``.

    Upload streams may be sync readables or async byte iterables. Blocking
    file reads and writes run in worker threads.
    """

    def __init__(
        self,
        zone_name: str = "",
        access_key: str = "",
        region: str = DEFAULT_REGION,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        config: BunnyStorageConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: AsyncHttpClient | None = None,
    ) -> None:
        """Create one async client from direct fields or a prebuilt config."""
        self._config = (
            BunnyStorageConfig(
                zone_name=zone_name,
                access_key=access_key,
                region=region,
                timeout_seconds=timeout_seconds,
            )
            if config is None
            else config
        )
        self._owns_http = http_client is None
        self._http = (
            AsyncHttpClient(
                timeout_seconds=self._config.timeout_seconds, transport=transport
            )
            if http_client is None
            else http_client
        )

    @property
    def config(self) -> BunnyStorageConfig:
        return self._config

    @property
    def zone_name(self) -> str:
        return self._config.zone_name

    @property
    def base_address(self) -> str:
        return self._config.base_address

    async def aclose(self) -> None:
        """Close HTTP resources owned by this client."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> AsyncBunnyStorageClient:
        """Enter async context manager scope."""
        return self

    async def __aexit__(self, *_: object) -> None:
        """Exit async context manager scope and close HTTP resources."""
        await self.aclose()

    async def delete(self, path: str, *, timeout: float | None = None) -> bool:
        """Delete one file; non-success statuses return ``False``."""
        normalized = self._normalize(path)
        response = await self._send("delete", "DELETE", normalized, timeout=timeout)
        if not response.is_success:
            logger.info("storage delete returned HTTP %s", response.status_code)
        return response.is_success

    async def get(self, path: str, *, timeout: float | None = None) -> StorageObject:
        """Return metadata for one file."""
        normalized = self._normalize(path)
        response = await self._send("get", "DESCRIBE", normalized, timeout=timeout)
        raise_for_status(
            response, operation="get", path=normalized, zone_name=self.zone_name
        )
        return decode_object(decode_body(response, path=normalized), path=normalized)

    async def list(
        self, path: str, *, timeout: float | None = None
    ) -> list[StorageObject]:
        """Return directory entries in the order the service lists them."""
        normalized = self._normalize(path, is_directory=True)
        response = await self._send("list", "GET", normalized, timeout=timeout)
        raise_for_status(
            response, operation="list", path=normalized, zone_name=self.zone_name
        )
        return decode_objects(decode_body(response, path=normalized), path=normalized)

    async def upload(
        self,
        source: Any,
        storage_path: str,
        validate_checksum: bool = False,
        sha256_checksum: str | None = None,
        content_type_override: str = "",
        *,
        timeout: float | None = None,
    ) -> Any:
        """Upload a local file path, readable stream or async byte iterable.

        Checksum validation without a precomputed checksum buffers the whole
        payload in memory before the request starts.
        """
        normalized = self._normalize(storage_path)
        upload_source = resolve_upload_source(source, allow_async=True)

        with ExitStack() as stack:
            if isinstance(upload_source, LocalPathSource):
                stream = stack.enter_context(await asyncio.to_thread(upload_source.open))
            else:
                stream = upload_source.stream

            content: bytes | Any
            if validate_checksum and not sha256_checksum:
                content = b"".join([chunk async for chunk in aiter_chunks(stream)])
                sha256_checksum = checksum_bytes(content)
            else:
                content = aiter_chunks(stream)

            response = await self._send(
                "upload",
                "PUT",
                normalized,
                headers=build_headers(
                    access_key=self._config.access_key,
                    checksum=sha256_checksum,
                    content_type_override=content_type_override,
                ),
                content=content,
                timeout=timeout,
            )

        raise_for_status(
            response,
            operation="upload",
            path=normalized,
            zone_name=self.zone_name,
            checksum=sha256_checksum,
        )
        return decode_body(response, path=normalized)

    async def create_folder(self, path: str, *, timeout: float | None = None) -> Any:
        """Create one directory and return the decoded JSON response."""
        normalized = self._normalize(path, is_directory=True)
        response = await self._send(
            "create_folder", "PUT", normalized, timeout=timeout
        )
        raise_for_status(
            response,
            operation="create_folder",
            path=normalized,
            zone_name=self.zone_name,
        )
        return decode_body(response, path=normalized)

    async def delete_folder(self, path: str, *, timeout: float | None = None) -> Any:
        """Delete one directory; non-success statuses raise the mapped error."""
        normalized = self._normalize(path, is_directory=True)
        response = await self._send(
            "delete_folder", "DELETE", normalized, timeout=timeout
        )
        raise_for_status(
            response,
            operation="delete_folder",
            path=normalized,
            zone_name=self.zone_name,
        )
        return decode_body(response, path=normalized)

    async def download(
        self,
        path: str,
        local_file_path: str | os.PathLike[str],
        *,
        timeout: float | None = None,
    ) -> Path:
        """Stream one file to disk and return the local path once complete."""
        normalized = self._normalize(path)
        target = Path(local_file_path)
        response = await self._open_stream("download", normalized, timeout=timeout)
        try:
            raise_for_status(
                response,
                operation="download",
                path=normalized,
                zone_name=self.zone_name,
            )
            async with AsyncAtomicWrite(target) as writer:
                async for chunk in response.aiter_bytes():
                    await writer.write(chunk)
        except httpx.TransportError as exc:
            raise map_interrupted_read(
                exc, path=normalized, url=self._url(normalized)
            ) from exc
        finally:
            await response.aclose()
        return target

    async def download_as_stream(
        self, path: str, *, timeout: float | None = None
    ) -> AsyncDownloadStream:
        """Return the live response body of one file; the caller closes it."""
        normalized = self._normalize(path)
        response = await self._open_stream(
            "download_as_stream", normalized, timeout=timeout
        )
        try:
            raise_for_status(
                response,
                operation="download_as_stream",
                path=normalized,
                zone_name=self.zone_name,
            )
        except BaseException:
            await response.aclose()
            raise
        return AsyncDownloadStream(response, path=normalized)

    def _normalize(self, path: str, *, is_directory: bool = False) -> str:
        return normalize_path(
            path, zone_name=self._config.zone_name, is_directory=is_directory
        )

    def _url(self, normalized_path: str) -> str:
        return f"{self._config.base_address}{normalized_path}"

    async def _send(
        self,
        operation: str,
        method: str,
        normalized_path: str,
        *,
        headers: dict[str, str] | None = None,
        content: Any = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Issue one request and map transport failures."""
        with log_context(
            {
                fields.OPERATION: operation,
                fields.METHOD: method,
                fields.ZONE: self.zone_name,
                fields.PATH: normalized_path,
            }
        ):
            started = time.perf_counter()
            try:
                response = await self._http.send(
                    method,
                    self._url(normalized_path),
                    headers=headers or build_headers(access_key=self._config.access_key),
                    content=content,
                    **request_options(timeout),
                )
            except HttpRequestError as exc:
                logger.warning("storage %s transport failure", operation)
                raise map_transport_error(exc) from exc
            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
            logger.debug(
                "storage %s %s -> HTTP %s in %.1fms",
                method,
                normalized_path,
                response.status_code,
                elapsed_ms,
                extra={
                    fields.STATUS_CODE: response.status_code,
                    fields.DURATION_MS: elapsed_ms,
                },
            )
        return response

    async def _open_stream(
        self,
        operation: str,
        normalized_path: str,
        *,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Open one streaming GET and map transport failures."""
        with log_context(
            {
                fields.OPERATION: operation,
                fields.METHOD: "GET",
                fields.ZONE: self.zone_name,
                fields.PATH: normalized_path,
            }
        ):
            try:
                response = await self._http.send(
                    "GET",
                    self._url(normalized_path),
                    stream=True,
                    headers=build_headers(access_key=self._config.access_key),
                    **request_options(timeout),
                )
            except HttpRequestError as exc:
                logger.warning("storage %s transport failure", operation)
                raise map_transport_error(exc) from exc
            logger.debug(
                "storage GET %s -> HTTP %s (streaming)",
                normalized_path,
                response.status_code,
            )
        return response
