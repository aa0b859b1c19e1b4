"""Per-call logging context carried through ``contextvars``.

Storage calls bind their zone, operation and path once; every record emitted
while the binding is active picks those fields up through ``ContextFilter``.
Bindings follow the current thread or task, so concurrent calls never see
each other's fields.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import Mapping

_CALL_FIELDS: ContextVar[dict[str, str]] = ContextVar("bunny_log_context", default={})


def _stringify(values: Mapping[str, object]) -> dict[str, str]:
    return {str(key): str(value) for key, value in values.items() if value is not None}


def get_context() -> dict[str, str]:
    """Return a copy of the fields bound for the current call."""
    return dict(_CALL_FIELDS.get())


def bind_context(**values: object) -> None:
    """Merge fields into the current context; ``None`` values are skipped."""
    if values:
        _CALL_FIELDS.set({**_CALL_FIELDS.get(), **_stringify(values)})


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when no key is given."""
    if not keys:
        _CALL_FIELDS.set({})
        return
    _CALL_FIELDS.set(
        {key: value for key, value in _CALL_FIELDS.get().items() if key not in keys}
    )


class log_context:
    """Bind fields for the duration of a ``with`` block, then restore.

    Exceptions leaving the block pass through untouched.
    """

    def __init__(self, values: Mapping[str, object]) -> None:
        self._values = _stringify(values)
        self._token: Token[dict[str, str]] | None = None

    def __enter__(self) -> None:
        self._token = _CALL_FIELDS.set({**_CALL_FIELDS.get(), **self._values})

    def __exit__(self, *_: object) -> None:
        if self._token is not None:
            _CALL_FIELDS.reset(self._token)
            self._token = None
