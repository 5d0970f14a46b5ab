"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import os

import pytest

# Set TESTING mode BEFORE any app imports to prevent .env file loading.
os.environ["TESTING"] = "1"

# Clear environment variables BEFORE any imports that might use Pydantic Settings
_ENV_VARS_TO_CLEAR = [
    "ENGINE_MAX_RECOMMENDATIONS",
    "STORAGE_KEY_PREFIX",
    "STORAGE_LATEST_SNAPSHOT_KEY",
    "STORAGE_HISTORY_KEY",
    "STORAGE_CONSENT_KEY",
    "STORAGE_HISTORY_LIMIT",
    "STORAGE_FILE_PATH",
    "HISTORY_PERIOD_DAYS",
    "HISTORY_TREND_THRESHOLD",
    "HISTORY_MIN_RECORDS_FOR_TREND",
    "LOG_FORMAT",
    "LOG_LEVEL",
    "LOG_INCLUDE_TIMESTAMP",
    "LOG_INCLUDE_CALLER",
]

for _var in _ENV_VARS_TO_CLEAR:
    os.environ.pop(_var, None)


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear environment variables that might be set by a developer shell.

    Also clears cached settings to force re-read of defaults.
    """
    for var in _ENV_VARS_TO_CLEAR:
        monkeypatch.delenv(var, raising=False)

    from mindease.config import get_settings  # noqa: PLC0415

    get_settings.cache_clear()


@pytest.fixture
def minimal_phq9() -> list[int]:
    """PHQ-9 responses with no symptoms."""
    return [0] * 9


@pytest.fixture
def minimal_gad7() -> list[int]:
    """GAD-7 responses with no symptoms."""
    return [0] * 7


@pytest.fixture
def severe_phq9_without_self_harm() -> list[int]:
    """PHQ-9 at 3 on every item except the self-harm item (total 24)."""
    return [3, 3, 3, 3, 3, 3, 3, 3, 0]


@pytest.fixture
def moderate_gad7() -> list[int]:
    """GAD-7 responses totalling 11 (moderate)."""
    return [2, 2, 2, 2, 1, 1, 1]
