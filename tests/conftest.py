"""
Shared pytest fixtures and configuration for retrykit tests.

This module provides:
- A sleep recorder so backoff waits are observed instead of slept
- Logging context cleanup for test isolation
- Settings cache / environment isolation
"""

import sys
from pathlib import Path
from typing import Generator

import pytest
import structlog

# Ensure retrykit package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from retrykit.core import settings as settings_module
from retrykit.core.logging import clear_context


class SleepRecorder:
    """Callable stand-in for ``time.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    """Drop bound context and any configured renderer after each test."""
    clear_context()
    yield
    clear_context()
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """Run each test without RETRYKIT_* env vars, a .env file, or cached settings."""
    import os

    for key in list(os.environ):
        if key.startswith("RETRYKIT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    settings_module._settings_cache = None
    yield
    settings_module._settings_cache = None


class FlakyWork:
    """Unit of work that raises the queued errors, then returns ``value``."""

    def __init__(self, *errors: Exception, value: object = "done") -> None:
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    def __call__(self) -> object:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


@pytest.fixture
def flaky():
    return FlakyWork
