"""Shared fixtures for planner tests."""

from __future__ import annotations

import time
from pathlib import Path

import pytest

from tools.wardrobe_store import SQLiteWardrobeStore


@pytest.fixture()
def edmonton_tz(monkeypatch: pytest.MonkeyPatch):
    """Pin the process timezone to UTC-6/UTC-7 for the duration of a test."""

    monkeypatch.setenv("TZ", "America/Edmonton")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture()
def store(tmp_path: Path) -> SQLiteWardrobeStore:
    return SQLiteWardrobeStore(tmp_path / "wardrobe.db")


@pytest.fixture(autouse=True)
def _isolated_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("APP_ENV", "APP_CONFIG_PATH", "OPENWEATHER_API_KEY", "WARDROBE_DB_PATH", "WEATHER_CITY"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def tokyo_tz(monkeypatch: pytest.MonkeyPatch):
    """Pin the process timezone to UTC+9."""

    monkeypatch.setenv("TZ", "Asia/Tokyo")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
