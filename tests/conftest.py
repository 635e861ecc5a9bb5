"""Shared fixtures: isolate every test from CSVCALC_* environment settings."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from csvcalc._config import get_settings


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in list(os.environ):
        if key.startswith("CSVCALC_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
