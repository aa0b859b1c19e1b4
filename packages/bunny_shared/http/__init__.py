"""Shared httpx wrappers and their typed failures."""

from .client import AsyncHttpClient, HttpClient, decode_json
from .errors import HttpError, HttpJsonDecodeError, HttpRequestError

__all__ = [
    "AsyncHttpClient",
    "HttpClient",
    "HttpError",
    "HttpJsonDecodeError",
    "HttpRequestError",
    "decode_json",
]
