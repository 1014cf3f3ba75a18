"""Fixtures for scheduling tests: a manual clock parked on a known Tuesday."""

from datetime import UTC, datetime

import pytest

from cadence.core.clock import ManualClock
from cadence.scheduling import AsyncScheduler, Scheduler

# Tuesday, noon UTC
START = datetime(2024, 6, 4, 12, 0, tzinfo=UTC)


@pytest.fixture
def start() -> datetime:
    return START


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(START)


@pytest.fixture
def scheduler(clock) -> Scheduler:
    return Scheduler(tz=UTC, clock=clock)


@pytest.fixture
def async_scheduler(clock) -> AsyncScheduler:
    return AsyncScheduler(tz=UTC, clock=clock)


@pytest.fixture
def calls() -> list:
    return []
