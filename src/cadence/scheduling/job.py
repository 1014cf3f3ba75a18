"""Jobs: schedule entries bound to a callback, plus their state machine.

A job moves along two axes::

    scheduling:  Waiting ──(now >= next_run)──► Due ──execute──► Waiting
    lifecycle:   Active ──(run policy exhausted)──► Exhausted   (terminal)

Each job owns one or more schedule entries (``every(TUESDAY).at("14:20")
.and_every(THURSDAY).at("15:00")``). Entries are evaluated independently
and each carries its own run policy unless the caller installs a shared
one (``once(shared=True)``).

Drift avoidance: after a firing, an entry's next instant is computed from
the instant it was *scheduled* for (minus any adjustment), never from
the time the poll noticed it, so boundaries march forward on their own
cadence.

``SyncJob`` and ``AsyncJob`` differ only in how the callback is handed
off (``_dispatch``): called inline, or wrapped in an ``asyncio`` task.

Tags:
    cadence, scheduling, job, state-machine, builder

Doc-Types:
    api-reference, architecture
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Awaitable, Callable
from datetime import datetime, time, tzinfo
from typing import Any, Generic, TypeVar

from cadence.core.clock import Clock
from cadence.core.errors import ScheduleError

from .intervals import Interval
from .policy import FOREVER, ONCE, RunPolicy
from .resolver import RepeatWindow, RunConfig, repeat_occurrences
from .timeofday import parse_time

J = TypeVar("J", bound="Job")


class ScheduleEntry:
    """One cadence of a job and its position along that cadence."""

    def __init__(self, interval: Interval) -> None:
        self.config = RunConfig(interval)
        self.repeat: RepeatWindow | None = None
        self.policy: RunPolicy = FOREVER
        self.next_run: datetime | None = None
        self.pending: deque[datetime] = deque()
        self._in_repeat = False

    def start(self, now: datetime) -> None:
        """(Re)compute the first occurrence relative to ``now``."""
        self.pending.clear()
        self._in_repeat = False
        self.next_run = self.config.next(now)

    def is_due(self, now: datetime) -> bool:
        return self.next_run is not None and now >= self.next_run

    def advance(self) -> None:
        """Move past the occurrence at ``next_run``."""
        fired = self.next_run
        if fired is None:
            return
        if self.repeat is not None and not self._in_repeat:
            self.pending.extend(repeat_occurrences(fired, self.repeat))

        if self.pending:
            self.next_run = self.pending.popleft()
            self._in_repeat = True
        else:
            self.next_run = self.config.following(fired)
            self._in_repeat = False

    def describe(self) -> str:
        parts = [f"every {self.config.interval}"]
        if self.config.anchor is not None:
            parts.append(f"at {self.config.anchor.isoformat()}")
        if self.config.adjustment is not None:
            parts.append(f"plus {self.config.adjustment.seconds}s")
        if self.repeat is not None:
            parts.append(f"repeating every {self.repeat.interval} x{self.repeat.times}")
        if self.policy != FOREVER:
            parts.append(str(self.policy))
        return " ".join(parts)

    def __repr__(self) -> str:
        return f"ScheduleEntry({self.describe()}, next_run={self.next_run})"


class Repeating(Generic[J]):
    """Intermediate builder returned by ``repeating_every()``."""

    def __init__(self, job: J, interval: Interval) -> None:
        self._job = job
        self._interval = interval

    def times(self, n: int) -> J:
        """Number of extra runs after every primary occurrence.

        ``times(0)`` is the same as not repeating at all.
        """
        if n == 0:
            return self._job
        self._job._set_repeat(RepeatWindow(self._interval, n))
        return self._job


class Job(ABC):
    """Schedule entries bound to a callback.

    Create jobs through ``Scheduler.every()``; the builder methods all
    act on the most recently declared entry and return the job.
    """

    def __init__(self, interval: Interval, tz: tzinfo, clock: Clock) -> None:
        self._entries: list[ScheduleEntry] = [ScheduleEntry(interval)]
        self._tz = tz
        self._clock = clock
        self._shared_policy: RunPolicy | None = None
        self._callback: Callable[[], Any] | None = None
        self._started = False
        self.last_run: datetime | None = None

    # === Builder ===

    def at(self, text: str) -> Job:
        """Anchor the latest entry to a clock time, e.g. ``"3:20 pm"``.

        Raises:
            TimeParseError: If ``text`` is not ``H:MM[:SS] [am|pm]``.
        """
        return self.at_time(parse_time(text))

    def try_at(self, text: str) -> Job:
        """Alias of ``at``; kept for callers that spell the fallible form."""
        return self.at(text)

    def at_time(self, anchor: time) -> Job:
        entry = self._entries[-1]
        entry.config = entry.config.with_time(anchor)
        self._refresh(entry)
        return self

    def plus(self, interval: Interval) -> Job:
        """Shift every occurrence of the latest entry by ``interval``."""
        entry = self._entries[-1]
        entry.config = entry.config.with_adjustment(interval)
        self._refresh(entry)
        return self

    def repeating_every(self, interval: Interval) -> Repeating:
        return Repeating(self, interval)

    def and_every(self, interval: Interval) -> Job:
        """Add another independent cadence to this job."""
        entry = ScheduleEntry(interval)
        self._entries.append(entry)
        self._refresh(entry)
        return self

    def once(self, shared: bool = False) -> Job:
        return self._set_policy(ONCE, shared)

    def count(self, n: int, shared: bool = False) -> Job:
        return self._set_policy(RunPolicy.countdown(n), shared)

    def forever(self, shared: bool = False) -> Job:
        return self._set_policy(FOREVER, shared)

    def run(self, callback: Callable[[], Any]) -> Job:
        """Bind the callback and compute the first occurrence."""
        if not callable(callback):
            raise ScheduleError(f"Job callback must be callable, got {callback!r}")
        self._callback = callback
        if not self._started:
            now = self._clock.now(self._tz)
            for entry in self._entries:
                entry.start(now)
            self._started = True
        return self

    def _set_policy(self, policy: RunPolicy, shared: bool) -> Job:
        if shared:
            self._shared_policy = policy
        else:
            self._entries[-1].policy = policy
        return self

    def _set_repeat(self, window: RepeatWindow) -> None:
        entry = self._entries[-1]
        entry.repeat = window
        self._refresh(entry)

    def _refresh(self, entry: ScheduleEntry) -> None:
        if self._started:
            entry.start(self._clock.now(self._tz))

    # === State ===

    @property
    def entries(self) -> tuple[ScheduleEntry, ...]:
        return tuple(self._entries)

    @property
    def name(self) -> str:
        callback = self._callback
        if callback is None:
            return "<unbound>"
        return getattr(callback, "__qualname__", None) or repr(callback)

    @property
    def shared_policy(self) -> RunPolicy | None:
        return self._shared_policy

    @property
    def is_exhausted(self) -> bool:
        if self._shared_policy is not None:
            return self._shared_policy.is_exhausted()
        return all(entry.policy.is_exhausted() for entry in self._entries)

    def _active_entries(self) -> list[ScheduleEntry]:
        if self._shared_policy is not None:
            return [] if self._shared_policy.is_exhausted() else list(self._entries)
        return [entry for entry in self._entries if not entry.policy.is_exhausted()]

    @property
    def next_run(self) -> datetime | None:
        """Earliest upcoming occurrence over the active entries."""
        upcoming = [e.next_run for e in self._active_entries() if e.next_run is not None]
        return min(upcoming) if upcoming else None

    def is_pending(self, now: datetime) -> bool:
        """True iff the job is active and at least one entry is due."""
        if not self._started:
            return False
        return any(entry.is_due(now) for entry in self._active_entries())

    def execute(self, now: datetime) -> Any:
        """Dispatch the callback once, then advance every due entry.

        State advances even if dispatch raises; the exception propagates.
        Returns whatever ``_dispatch`` returns (an ``asyncio.Task`` for
        async jobs).
        """
        if self._callback is None or self.is_exhausted:
            return None

        due = [entry for entry in self._active_entries() if entry.is_due(now)]
        try:
            return self._dispatch(self._callback)
        finally:
            for entry in due:
                entry.advance()
                if self._shared_policy is None:
                    entry.policy = entry.policy.consume()
            if self._shared_policy is not None:
                self._shared_policy = self._shared_policy.consume()
            self.last_run = now

    @abstractmethod
    def _dispatch(self, callback: Callable[[], Any]) -> Any:
        """Hand the callback to its execution context."""

    def __repr__(self) -> str:
        entries = "; ".join(entry.describe() for entry in self._entries)
        return f"{type(self).__name__}({self.name}: {entries}, next_run={self.next_run})"


class SyncJob(Job):
    """Job whose callback runs inline, blocking the poll."""

    def _dispatch(self, callback: Callable[[], Any]) -> None:
        callback()


class AsyncJob(Job):
    """Job whose callback returns an awaitable, run as an ``asyncio`` task.

    Must be executed while an event loop is running.
    """

    def _dispatch(self, callback: Callable[[], Awaitable[Any]]) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        return asyncio.ensure_future(callback(), loop=loop)


__all__ = ["ScheduleEntry", "Repeating", "Job", "SyncJob", "AsyncJob"]
