"""Scheduler - owns the jobs and polls them against the clock.

Manifesto:
    The scheduler is deliberately thin. All timing logic lives in the
    resolver and the job state machine; the scheduler only keeps jobs in
    insertion order, asks each one "are you due?" and runs the ones that
    are. That keeps ``run_pending`` trivially testable with an injected
    clock and an explicit ``now``.

┌──────────────────────────────────────────────────────────────────────────────┐
│  SCHEDULER                                                                    │
│                                                                               │
│   every(interval) ──► SyncJob (builder) ──► run(callback)                     │
│                                                                               │
│   run_pending(now)                                                            │
│     1. now = now or clock.now(tz)                                             │
│     2. snapshot = [job for job in jobs if job.is_pending(now)]                │
│     3. for job in snapshot: job.execute(now)   (insertion order, blocking)    │
│                                                                               │
│   watch_thread(interval) ──► WatchHandle (background run_pending loop)        │
└──────────────────────────────────────────────────────────────────────────────┘

Usage:
    >>> from cadence import Scheduler, minutes, seconds, day, TUESDAY, THURSDAY, WEEKDAY
    >>> scheduler = Scheduler(tz="UTC")
    >>> scheduler.every(minutes(10)).plus(seconds(30)).run(lambda: print("Periodic task"))
    >>> scheduler.every(day(1)).at("3:20 pm").run(lambda: print("Daily task"))
    >>> (scheduler.every(TUESDAY).at("14:20:17")
    ...     .and_every(THURSDAY).at("15:00")
    ...     .run(lambda: print("Twice a week")))
    >>> scheduler.every(WEEKDAY).run(lambda: print("Every weekday at midnight"))
    >>> (scheduler.every(day(1)).at("10:00 am")
    ...     .repeating_every(minutes(30)).times(6)
    ...     .run(lambda: print("Every half hour from 10 AM to 1 PM inclusive")))
    >>>
    >>> scheduler.run_pending()                     # poll once, or
    >>> handle = scheduler.watch_thread(0.5)        # poll in the background
    >>> handle.stop()

Tags:
    cadence, scheduling, scheduler, polling

Doc-Types:
    api-reference, architecture-diagram
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import TYPE_CHECKING, Generic, TypeVar

from cadence.core.clock import Clock, SystemClock, resolve_timezone
from cadence.core.logging import configure_logging_from_settings, get_logger

from .intervals import Interval
from .job import Job, SyncJob

if TYPE_CHECKING:
    from cadence.core.settings import CadenceSettings

    from .watch import WatchHandle

logger = get_logger(__name__)

J = TypeVar("J", bound=Job)


class BaseScheduler(Generic[J]):
    """Job collection shared by the sync and async schedulers."""

    job_class: type[J]

    def __init__(
        self,
        tz: tzinfo | str | None = None,
        clock: Clock | None = None,
        *,
        poll_interval_seconds: float = 1.0,
        stop_timeout_seconds: float | None = None,
    ) -> None:
        """Initialize scheduler.

        Args:
            tz: Zone dates and times are interpreted in (tzinfo or IANA
                name). Defaults to the local zone.
            clock: Source of "now" (default: the system clock)
            poll_interval_seconds: Default interval for background polling
            stop_timeout_seconds: Default max wait when stopping a watch
        """
        self.tz = resolve_timezone(tz)
        self.clock: Clock = clock or SystemClock()
        self.poll_interval_seconds = poll_interval_seconds
        self.stop_timeout_seconds = stop_timeout_seconds
        self._jobs: list[J] = []

    @classmethod
    def from_settings(
        cls,
        settings: CadenceSettings | None = None,
        clock: Clock | None = None,
        *,
        configure_logs: bool = True,
    ):
        """Create a scheduler configured from ``CadenceSettings``.

        Unless ``configure_logs`` is False, structlog is also set up from
        the settings' ``log_level`` and ``log_json``.
        """
        if settings is None:
            from cadence.core.settings import CadenceSettings

            settings = CadenceSettings()
        if configure_logs:
            configure_logging_from_settings(settings)
        return cls(
            settings.timezone,
            clock,
            poll_interval_seconds=settings.poll_interval_seconds,
            stop_timeout_seconds=settings.stop_timeout_seconds,
        )

    # === Jobs ===

    def every(self, interval: Interval) -> J:
        """Add a new job to the scheduler, to be run on the given interval."""
        job = self.job_class(interval, self.tz, self.clock)
        self._jobs.append(job)
        return job

    def remove(self, job: J) -> bool:
        """Remove a job. Returns False if it was not scheduled here."""
        for index, candidate in enumerate(self._jobs):
            if candidate is job:
                del self._jobs[index]
                logger.debug("scheduler.job_removed", job=job.name)
                return True
        return False

    def clear(self) -> None:
        self._jobs.clear()

    @property
    def jobs(self) -> list[J]:
        return list(self._jobs)

    def __len__(self) -> int:
        return len(self._jobs)

    # === Time ===

    def now(self) -> datetime:
        return self.clock.now(self.tz)

    def _resolve_now(self, now: datetime | None) -> datetime:
        if now is None:
            return self.now()
        if now.tzinfo is None:
            return now.replace(tzinfo=self.tz)
        return now

    @property
    def next_run(self) -> datetime | None:
        """Earliest next run over all active jobs."""
        upcoming = [job.next_run for job in self._jobs if job.next_run is not None]
        return min(upcoming) if upcoming else None

    def idle_seconds(self, now: datetime | None = None) -> float | None:
        """Seconds until the next job is due (negative if overdue)."""
        next_run = self.next_run
        if next_run is None:
            return None
        return (next_run - self._resolve_now(now)).total_seconds()

    def _due_jobs(self, now: datetime) -> list[J]:
        due = [job for job in self._jobs if job.is_pending(now)]
        if due:
            logger.debug("scheduler.jobs_due", count=len(due), now=now.isoformat())
        return due


class Scheduler(BaseScheduler[SyncJob]):
    """Synchronous job scheduler.

    ``run_pending`` blocks while due callbacks run, one after another in
    insertion order. A long-running callback delays the jobs behind it;
    move such work onto another thread, or use ``AsyncScheduler``.
    """

    job_class = SyncJob

    def run_pending(self, now: datetime | None = None) -> None:
        """Run all jobs that are due at ``now`` (default: the clock's now).

        The set of due jobs is fixed on entry; jobs that become due while
        callbacks run are picked up by the next call. A callback's
        exception propagates out of this call, after that job's schedule
        has advanced; later jobs in the snapshot wait for the next call.
        """
        now = self._resolve_now(now)
        for job in self._due_jobs(now):
            logger.debug("scheduler.job_dispatched", job=job.name)
            job.execute(now)

    def watch_thread(
        self,
        interval_seconds: float | None = None,
        *,
        stop_timeout: float | None = None,
    ) -> WatchHandle:
        """Call ``run_pending`` repeatedly on a background thread.

        The loop ends when ``stop()`` is called on the returned handle,
        when it is used as a context manager and the block exits, or when
        the handle is garbage collected.

        Args:
            interval_seconds: Sleep between polls (default: the scheduler's
                ``poll_interval_seconds``). Values between 0.1 and 10 seconds
                are reasonable; long sleeps make ``stop()`` slow only if a
                callback is running, since the sleep itself is interruptible.
            stop_timeout: Max seconds ``stop()`` waits for the thread
        """
        from .watch import WatchHandle

        return WatchHandle(
            self,
            interval_seconds if interval_seconds is not None else self.poll_interval_seconds,
            stop_timeout=stop_timeout if stop_timeout is not None else self.stop_timeout_seconds,
        )


__all__ = ["BaseScheduler", "Scheduler"]
