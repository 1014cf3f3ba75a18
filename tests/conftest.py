"""
Shared pytest fixtures and configuration for cadence tests.

This module provides:
- Structlog/contextvar cleanup for test isolation
- Environment isolation for ``CADENCE_*`` settings
- A host time zone override (``TZ`` + ``time.tzset``)

Scheduling fixtures (manual clock, UTC scheduler) live in
``tests/scheduling/conftest.py``.
"""

import os
import sys
import time
from pathlib import Path

import pytest
import structlog

# Ensure cadence package is importable without an install
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog configuration or bound context a test leaves behind."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_cadence_env(monkeypatch):
    """Hide CADENCE_* variables from the host environment."""
    for key in list(os.environ):
        if key.startswith("CADENCE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def host_timezone(monkeypatch):
    """Switch the process-local zone for one test; restored afterwards."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def switch(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield switch
    monkeypatch.undo()
    time.tzset()
