"""
Clock abstraction: where the scheduler reads "now" from.

The scheduler never calls ``datetime.now()`` directly. It holds a
``Clock`` and asks it for the current time in its zone, so tests can swap
in a ``ManualClock`` and drive time deterministically.

Manifesto:
    - **Injectable:** no ambient global time source
    - **Zone-aware:** every instant handed to the resolver carries tzinfo
    - **Tiny:** one method, ``now(tz)``

Examples:
    >>> from datetime import UTC, datetime, timedelta
    >>> clock = ManualClock(datetime(2024, 6, 4, 12, 0, tzinfo=UTC))
    >>> clock.advance(timedelta(minutes=10))
    >>> clock.now(UTC)
    datetime.datetime(2024, 6, 4, 12, 10, tzinfo=datetime.timezone.utc)

Tags:
    clock, time-provider, testing, timezone, cadence

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import threading
import time
import zoneinfo
from datetime import datetime, timedelta, tzinfo
from typing import Protocol, runtime_checkable

from .errors import InvalidConfigError


@runtime_checkable
class Clock(Protocol):
    """Supplies the current time in a given zone."""

    def now(self, tz: tzinfo) -> datetime:
        """Return the current time, converted to ``tz``."""
        ...


class SystemClock:
    """The real wall clock."""

    def now(self, tz: tzinfo) -> datetime:
        return datetime.now(tz)

    def __repr__(self) -> str:
        return "SystemClock()"


class ManualClock:
    """Deterministic clock for tests; time moves only when told to.

    Thread-safe, so a test can move time while a ``WatchHandle`` polls.
    """

    def __init__(self, start: datetime) -> None:
        if start.tzinfo is None:
            raise ValueError("ManualClock requires a timezone-aware start time")
        self._now = start
        self._lock = threading.Lock()

    def now(self, tz: tzinfo) -> datetime:
        with self._lock:
            return self._now.astimezone(tz)

    def set(self, when: datetime) -> None:
        """Jump to ``when`` (may move backwards)."""
        if when.tzinfo is None:
            raise ValueError("ManualClock requires timezone-aware times")
        with self._lock:
            self._now = when

    def advance(self, delta: timedelta) -> None:
        """Move the clock forward by ``delta``."""
        with self._lock:
            self._now = self._now + delta

    def __repr__(self) -> str:
        return f"ManualClock({self._now.isoformat()})"


_EPOCH = datetime(1970, 1, 1)


class LocalTimezone(tzinfo):
    """The host's local zone, following its DST rules.

    Offsets are looked up per instant through the C library (``TZ``,
    ``/etc/localtime``), so a scheduler created in summer still resolves
    winter dates at the winter offset. Instants the platform cannot
    convert (before 1970 on some systems) fall back to standard time.
    """

    def _struct(self, dt: datetime | None) -> time.struct_time | None:
        if dt is None:
            return time.localtime()
        fields = (dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second, dt.weekday(), 0, -1)
        try:
            return time.localtime(time.mktime(fields))
        except (OverflowError, OSError, ValueError):
            return None

    def utcoffset(self, dt: datetime | None) -> timedelta:
        local = self._struct(dt)
        if local is None:
            return timedelta(seconds=-time.timezone)
        return timedelta(seconds=local.tm_gmtoff)

    def dst(self, dt: datetime | None) -> timedelta:
        return self.utcoffset(dt) - timedelta(seconds=-time.timezone)

    def tzname(self, dt: datetime | None) -> str:
        local = self._struct(dt)
        if local is None:
            return time.tzname[0]
        return local.tm_zone

    def fromutc(self, dt: datetime) -> datetime:
        if dt.tzinfo is not self:
            raise ValueError("fromutc: dt.tzinfo is not self")
        stamp = (dt.replace(tzinfo=None) - _EPOCH) // timedelta(seconds=1)
        try:
            local = time.localtime(stamp)
        except (OverflowError, OSError, ValueError):
            return dt + timedelta(seconds=-time.timezone)
        return datetime(*local[:6], microsecond=dt.microsecond, tzinfo=self)

    def __repr__(self) -> str:
        return "LocalTimezone()"


def local_timezone() -> tzinfo:
    """Return the host's local zone."""
    return LocalTimezone()


def resolve_timezone(tz: tzinfo | str | None) -> tzinfo:
    """Turn a tzinfo, an IANA zone name or ``None`` (local) into a tzinfo.

    Raises:
        InvalidConfigError: If ``tz`` names an unknown zone.
    """
    if tz is None:
        return local_timezone()
    if isinstance(tz, tzinfo):
        return tz
    try:
        return zoneinfo.ZoneInfo(tz)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidConfigError("timezone", tz, f"Unknown time zone: {tz!r}", cause=e) from e


__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "LocalTimezone",
    "local_timezone",
    "resolve_timezone",
]
