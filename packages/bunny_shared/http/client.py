"""Thin httpx wrappers shared by the sync and async storage clients.

Both wrappers expose one ``send`` entry point. Transport failures always
become ``HttpRequestError``; statuses are returned untouched because the
storage layer maps them itself.
"""

from __future__ import annotations

from typing import Any

import httpx

from .errors import HttpJsonDecodeError, HttpRequestError


def _body_text(response: httpx.Response) -> str:
    try:
        return response.text
    except (httpx.HTTPError, UnicodeDecodeError):
        return ""


def decode_json(response: httpx.Response) -> Any:
    """Parse a response body as JSON.

    Raises:
        HttpJsonDecodeError: If the body is not valid JSON.
    """
    try:
        return response.json()
    except ValueError as exc:
        request = response.request
        raise HttpJsonDecodeError(
            message=f"Invalid JSON response for {request.method} {request.url}",
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            body=_body_text(response),
        ) from exc


def _transport_failure(exc: httpx.RequestError, request: httpx.Request) -> HttpRequestError:
    return HttpRequestError(
        message=f"HTTP request failed for {request.method} {request.url}",
        method=request.method,
        url=str(request.url),
        cause=exc,
    )


class HttpClient:
    """Synchronous wrapper over ``httpx.Client``."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(timeout=timeout_seconds, transport=transport)

    def close(self) -> None:
        """Close the underlying client."""
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def send(
        self,
        method: str,
        url: str,
        *,
        stream: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one request.

        With ``stream`` set the body is left unread and the caller must close
        the response. Extra keyword arguments go to ``httpx.Client.build_request``.
        """
        request = self._client.build_request(method, url, **kwargs)
        try:
            return self._client.send(request, stream=stream)
        except httpx.RequestError as exc:
            raise _transport_failure(exc, request) from exc


class AsyncHttpClient:
    """Asynchronous wrapper over ``httpx.AsyncClient``."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    async def aclose(self) -> None:
        """Close the underlying client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def send(
        self,
        method: str,
        url: str,
        *,
        stream: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        """Async counterpart of ``HttpClient.send``."""
        request = self._client.build_request(method, url, **kwargs)
        try:
            return await self._client.send(request, stream=stream)
        except httpx.RequestError as exc:
            raise _transport_failure(exc, request) from exc
