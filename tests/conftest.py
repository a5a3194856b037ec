"""Shared test fixtures.

Every test gets isolated config and cache directories under ``tmp_path``
and a scrubbed ``LINEAR_*`` environment, so nothing touches the real user
profile.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from linear_cli.core.settings import get_settings


class FakeClock:
    """Manually advanced clock returning seconds since epoch."""

    def __init__(self, now: float = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "config"


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, config_dir: Path, cache_dir: Path) -> Iterator[None]:
    """Point settings at temp directories and drop any real credentials."""
    for key in list(os.environ):
        if key.startswith("LINEAR_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("LINEAR_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("LINEAR_CACHE_DIR", str(cache_dir))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
