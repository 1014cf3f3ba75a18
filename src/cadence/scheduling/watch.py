"""Background polling thread for a synchronous ``Scheduler``.

┌──────────────────────────────────────────────────────────────────────────────┐
│  WATCH HANDLE                                                                 │
│                                                                               │
│   WatchHandle(scheduler, interval)                                            │
│      │                                                                        │
│      ▼                                                                        │
│   ┌─────────────────────────────────────────────────────────┐                 │
│   │              Daemon Thread (_poll_loop)                 │                 │
│   │                                                         │                 │
│   │   while not stop_event.is_set():                        │                 │
│   │       scheduler.run_pending()   ◄── errors logged,      │                 │
│   │       tick_count += 1               loop continues      │                 │
│   │       stop_event.wait(interval)                         │                 │
│   └─────────────────────────────────────────────────────────┘                 │
│                                                                               │
│   stop()          stop_event.set(); thread.join(stop_timeout)                 │
│   __exit__        stop()                                                      │
│   GC / exit       weakref.finalize ──► stop_event.set()   (no join)           │
│                                                                               │
│  The thread only holds the scheduler, the stop event and a state record,      │
│  never the handle, so dropping the last handle reference triggers the         │
│  finalizer and the loop ends at its next wake-up.                             │
└──────────────────────────────────────────────────────────────────────────────┘

Tags:
    cadence, scheduling, threading, background, lifecycle

Doc-Types:
    api-reference, architecture-diagram
"""

from __future__ import annotations

import threading
import weakref
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from cadence.core.errors import InvalidConfigError
from cadence.core.logging import get_logger

if TYPE_CHECKING:
    from .scheduler import Scheduler

logger = get_logger(__name__)


@dataclass
class WatchHealth:
    """Snapshot of a watch loop's health."""

    running: bool
    interval_seconds: float
    tick_count: int = 0
    last_tick: datetime | None = None
    error_count: int = 0
    last_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "running": self.running,
            "interval_seconds": self.interval_seconds,
            "tick_count": self.tick_count,
            "last_tick": self.last_tick.isoformat() if self.last_tick else None,
            "error_count": self.error_count,
            "last_error": self.last_error,
        }


class _LoopState:
    """Counters shared between the loop thread and the handle."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.tick_count = 0
        self.last_tick: datetime | None = None
        self.error_count = 0
        self.last_error: str | None = None


def _poll_loop(
    scheduler: Scheduler,
    interval_seconds: float,
    stop_event: threading.Event,
    state: _LoopState,
) -> None:
    logger.info("watch.started", interval_seconds=interval_seconds)
    while not stop_event.is_set():
        try:
            scheduler.run_pending()
        except Exception as e:
            logger.exception("watch.tick_failed", error=str(e))
            with state.lock:
                state.error_count += 1
                state.last_error = f"{type(e).__name__}: {e}"
        with state.lock:
            state.tick_count += 1
            state.last_tick = datetime.now(UTC)
        stop_event.wait(interval_seconds)
    logger.info("watch.stopped", ticks=state.tick_count)


class WatchHandle:
    """Owns the thread that polls a scheduler in the background.

    Example:
        >>> with scheduler.watch_thread(0.5):
        ...     serve_forever()
    """

    def __init__(
        self,
        scheduler: Scheduler,
        interval_seconds: float,
        *,
        stop_timeout: float | None = None,
        name: str = "cadence-watch",
    ) -> None:
        if interval_seconds <= 0:
            raise InvalidConfigError(
                "interval_seconds", interval_seconds, "Polling interval must be positive"
            )
        self.interval_seconds = interval_seconds
        self.stop_timeout = stop_timeout
        self._stop_event = threading.Event()
        self._state = _LoopState()
        self._stopped = False

        self._thread = threading.Thread(
            target=_poll_loop,
            args=(scheduler, interval_seconds, self._stop_event, self._state),
            daemon=True,
            name=name,
        )
        self._finalizer = weakref.finalize(self, self._stop_event.set)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Stop polling and wait for the loop to finish its current tick.

        Args:
            timeout: Max seconds to wait (default: ``stop_timeout``).
                ``None`` waits until the thread exits.
        """
        self._stop_event.set()
        self._finalizer.detach()
        if self._stopped:
            return
        if threading.current_thread() is self._thread:
            # called from a callback; the loop exits once it returns
            return

        self._thread.join(timeout if timeout is not None else self.stop_timeout)
        if self._thread.is_alive():
            logger.warning("watch.stop_timeout", thread=self._thread.name)
            return
        self._stopped = True

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._stop_event.is_set()

    @property
    def thread(self) -> threading.Thread:
        return self._thread

    def health(self) -> WatchHealth:
        with self._state.lock:
            return WatchHealth(
                running=self.is_running,
                interval_seconds=self.interval_seconds,
                tick_count=self._state.tick_count,
                last_tick=self._state.last_tick,
                error_count=self._state.error_count,
                last_error=self._state.last_error,
            )

    def __enter__(self) -> WatchHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def __repr__(self) -> str:
        state = "running" if self.is_running else "stopped"
        return f"WatchHandle({self._thread.name}, {state}, every {self.interval_seconds}s)"


__all__ = ["WatchHandle", "WatchHealth"]
