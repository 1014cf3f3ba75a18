"""Tests for WatchHandle, the background polling thread."""

import gc
import threading
import time
from datetime import timedelta

import pytest

from cadence.core.errors import InvalidConfigError
from cadence.scheduling import Scheduler, WatchHandle
from cadence.scheduling.intervals import minutes, seconds


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


class TestWatchHandle:
    """Test WatchHandle lifecycle."""

    def test_start_and_stop(self, scheduler, clock, calls):
        scheduler.every(minutes(1)).run(lambda: calls.append(1))
        clock.advance(timedelta(minutes=1))

        handle = scheduler.watch_thread(0.01)
        assert handle.is_running
        assert wait_until(lambda: calls)

        handle.stop()
        assert not handle.is_running
        assert not handle.thread.is_alive()
        assert calls == [1]

    def test_thread_is_daemon(self, scheduler):
        handle = scheduler.watch_thread(0.01)
        try:
            assert handle.thread.daemon
            assert handle.thread.name == "cadence-watch"
        finally:
            handle.stop()

    def test_context_manager(self, scheduler, clock, calls):
        scheduler.every(seconds(1)).run(lambda: calls.append(1))
        with scheduler.watch_thread(0.01) as handle:
            clock.advance(timedelta(seconds=1))
            assert wait_until(lambda: calls)
        assert not handle.thread.is_alive()

    def test_stop_is_idempotent(self, scheduler):
        handle = scheduler.watch_thread(0.01)
        handle.stop()
        handle.stop()
        assert not handle.thread.is_alive()

    def test_default_interval_from_scheduler(self, clock):
        scheduler = Scheduler(tz="UTC", clock=clock, poll_interval_seconds=0.05)
        with scheduler.watch_thread() as handle:
            assert handle.interval_seconds == 0.05

    @pytest.mark.parametrize("interval", [0, -1])
    def test_rejects_non_positive_interval(self, scheduler, interval):
        with pytest.raises(InvalidConfigError):
            WatchHandle(scheduler, interval)

    def test_callback_errors_do_not_stop_polling(self, scheduler, clock):
        attempts = []

        def flaky():
            attempts.append(1)
            clock.advance(timedelta(minutes=1))
            raise RuntimeError("flaky")

        scheduler.every(minutes(1)).run(flaky)
        clock.advance(timedelta(minutes=1))

        with scheduler.watch_thread(0.01) as handle:
            assert wait_until(lambda: len(attempts) >= 3)
            assert handle.thread.is_alive()

        health = handle.health()
        assert health.error_count == len(attempts)
        assert health.last_error == "RuntimeError: flaky"

    def test_stop_from_callback(self, scheduler, clock):
        holder = {}
        stopped = threading.Event()

        def stop_self():
            holder["handle"].stop()
            stopped.set()

        scheduler.every(minutes(1)).once().run(stop_self)
        holder["handle"] = scheduler.watch_thread(0.01)
        clock.advance(timedelta(minutes=1))

        assert stopped.wait(2.0)
        holder["handle"].thread.join(2.0)
        assert not holder["handle"].thread.is_alive()

    def test_stop_timeout(self, scheduler, clock):
        entered = threading.Event()
        release = threading.Event()

        def block():
            entered.set()
            release.wait(5.0)

        scheduler.every(minutes(1)).once().run(block)
        clock.advance(timedelta(minutes=1))
        handle = scheduler.watch_thread(0.01)
        assert entered.wait(2.0)

        handle.stop(timeout=0.05)
        assert handle.thread.is_alive()

        release.set()
        handle.stop()
        assert not handle.thread.is_alive()

    def test_release_without_stop_ends_thread(self, scheduler):
        handle = scheduler.watch_thread(0.01)
        thread = handle.thread
        assert thread.is_alive()

        del handle
        gc.collect()

        thread.join(2.0)
        assert not thread.is_alive()


class TestWatchHealth:
    def test_health_counts_ticks(self, scheduler):
        with scheduler.watch_thread(0.01) as handle:
            assert wait_until(lambda: handle.health().tick_count >= 2)
            health = handle.health()
            assert health.running is True
            assert health.interval_seconds == 0.01
            assert health.last_tick is not None
            assert health.error_count == 0

        assert handle.health().running is False

    def test_to_dict(self, scheduler):
        with scheduler.watch_thread(0.01) as handle:
            wait_until(lambda: handle.health().tick_count >= 1)
        d = handle.health().to_dict()
        assert set(d) == {
            "running",
            "interval_seconds",
            "tick_count",
            "last_tick",
            "error_count",
            "last_error",
        }
        assert d["running"] is False
        assert isinstance(d["last_tick"], str)
