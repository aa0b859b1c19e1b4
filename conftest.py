"""Pytest configuration shared by the SDK, shared-layer and CLI tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _isolate_storage_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ambient ``BUNNY_*`` variables so settings resolve deterministically."""
    for key in list(os.environ):
        if key.startswith("BUNNY_"):
            monkeypatch.delenv(key, raising=False)
