"""Structured logging for the storage packages.

``configure_logging`` installs the handler, ``log_context`` binds per-call
fields, and ``get_logger`` hands out standard library loggers.
"""

from .config import configure_logging, get_logger
from .context import bind_context, clear_context, get_context, log_context

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_context",
    "get_logger",
    "log_context",
]
