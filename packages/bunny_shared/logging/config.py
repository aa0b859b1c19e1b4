"""Logging setup for the storage SDK and CLI.

A single handler is installed on the root logger and writes either one JSON
object per line or plain text. Fields bound with ``log_context`` and the
record extras named in ``fields.RECORD_EXTRAS`` ride along on every line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from . import fields
from .context import bind_context, get_context


def _structured_fields(record: logging.LogRecord) -> dict[str, Any]:
    values: dict[str, Any] = {}
    context = getattr(record, "context", None)
    if isinstance(context, dict):
        values.update(context)
    for key in fields.RECORD_EXTRAS:
        if hasattr(record, key):
            values[key] = getattr(record, key)
    return values


class ContextFilter(logging.Filter):
    """Attach the currently bound context to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.context = get_context()
        return True


class JsonFormatter(logging.Formatter):
    """One compact JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }
        payload.update(_structured_fields(record))
        if record.exc_info:
            payload[fields.EXCEPTION] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Classic text lines followed by sorted ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _structured_fields(record)
        if not extras:
            return line
        pairs = " ".join(f"{key}={extras[key]}" for key in sorted(extras))
        return f"{line} {pairs}"


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
    environment: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Install the storage log handler on the root logger.

    Logs go to stderr unless ``stream`` is given, so CLI output on stdout
    stays clean. Calling this again replaces the previous handler.
    """
    level_name = level.upper()
    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setLevel(level_name)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if json_output else PlainFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level_name)

    bind_context(
        **{fields.SERVICE: service or None, fields.ENVIRONMENT: environment or None}
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a standard library logger."""
    return logging.getLogger(name)
