"""Shared pytest fixtures for snapshot resolver tests.

Fixture summary
---------------
clean_settings     — autouse; strips SNAPSHOT_RESOLVER_* env vars and resets
                     the cached settings around every test.
load_fixture       — loads a JSON file from fixtures/api_responses/wayback.

All tests mock the network with respx; none require a live connection.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from snapshot_resolver.config.settings import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "api_responses" / "wayback"


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run each test against default settings."""
    for key in ("AVAILABILITY_URL", "REQUEST_TIMEOUT", "USER_AGENT", "LOG_LEVEL"):
        monkeypatch.delenv(f"SNAPSHOT_RESOLVER_{key}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def load_fixture() -> Callable[[str], dict[str, Any]]:
    """Return a loader for JSON fixtures by file name."""

    def _load(name: str) -> dict[str, Any]:
        return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))

    return _load
