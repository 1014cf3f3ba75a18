"""Async scheduler: due jobs become ``asyncio`` tasks instead of blocking calls.

``run_pending`` is synchronous and never awaits a callback. It creates one
task per due job, in insertion order, and hands them back; completions
happen in whatever order the event loop finishes them. Callback failures
surface through the returned tasks.

Usage:
    >>> scheduler = AsyncScheduler(tz="UTC")
    >>> async def refresh():
    ...     await fetch_prices()
    >>> scheduler.every(minutes(5)).run(refresh)
    >>>
    >>> stop = asyncio.Event()
    >>> await scheduler.watch(0.5, stop)   # until stop.set()

Tags:
    cadence, scheduling, asyncio, tasks

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio
from datetime import datetime

from cadence.core.errors import InvalidConfigError
from cadence.core.logging import get_logger

from .job import AsyncJob
from .scheduler import BaseScheduler

logger = get_logger(__name__)


class AsyncScheduler(BaseScheduler[AsyncJob]):
    """Job scheduler whose callbacks return awaitables."""

    job_class = AsyncJob

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.in_flight: set[asyncio.Future] = set()

    def run_pending(self, now: datetime | None = None) -> list[asyncio.Future]:
        """Start a task for every job due at ``now`` and return the tasks.

        Must be called while an event loop is running.
        """
        now = self._resolve_now(now)
        tasks: list[asyncio.Future] = []
        for job in self._due_jobs(now):
            task = job.execute(now)
            if task is None:
                continue
            self.in_flight.add(task)
            task.add_done_callback(self.in_flight.discard)
            logger.debug("async_scheduler.task_created", job=job.name)
            tasks.append(task)
        return tasks

    async def watch(
        self,
        interval_seconds: float | None = None,
        stop: asyncio.Event | None = None,
    ) -> None:
        """Poll ``run_pending`` until ``stop`` is set.

        Without a ``stop`` event the loop runs until its task is cancelled.
        Setting ``stop`` ends polling only; tasks already started keep
        running (see ``drain``).
        """
        interval = interval_seconds if interval_seconds is not None else self.poll_interval_seconds
        if interval <= 0:
            raise InvalidConfigError("interval_seconds", interval, "Polling interval must be positive")
        stop = stop or asyncio.Event()

        logger.info("async_scheduler.watch_started", interval_seconds=interval)
        while not stop.is_set():
            self.run_pending()
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except TimeoutError:
                pass
        logger.info("async_scheduler.watch_stopped", in_flight=len(self.in_flight))

    async def drain(self, return_exceptions: bool = False) -> list:
        """Wait for every in-flight task to finish."""
        if not self.in_flight:
            return []
        return await asyncio.gather(*list(self.in_flight), return_exceptions=return_exceptions)


__all__ = ["AsyncScheduler"]
