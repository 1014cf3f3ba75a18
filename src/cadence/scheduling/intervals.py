"""Interval value types: the cadence a schedule entry follows.

An ``Interval`` is one of a closed set of variants:

==================  ===============================================
Kind                Meaning
==================  ===============================================
``seconds(n)``      next multiple of n seconds since the epoch
``minutes(n)``      next multiple of n minutes since midnight
``hours(n)``        next multiple of n hours since midnight
``days(n)``         next midnight of a day whose ordinal divides by n
``weeks(n)``        next Monday of a week whose index divides by n
``MONDAY``..        that weekday
``WEEKDAY``         any of Monday through Friday
==================  ===============================================

Plural and singular helpers behave identically and exist so schedules
read grammatically: ``every(day(1))``, ``every(minutes(15))``.

Tags:
    cadence, scheduling, interval, value-object

Doc-Types:
    api-reference, data-model
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from cadence.core.errors import IntervalError


class Weekday(str, Enum):
    """Day of the week; values are the stable serialized names."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def number(self) -> int:
        """Monday is 0, Sunday is 6 (same as ``date.weekday()``)."""
        return _WEEKDAY_ORDER.index(self)

    @property
    def is_workday(self) -> bool:
        return self.number < 5

    @classmethod
    def of(cls, day: date) -> Weekday:
        return _WEEKDAY_ORDER[day.weekday()]


_WEEKDAY_ORDER = list(Weekday)


class IntervalKind(str, Enum):
    """Variant tag of an Interval."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    WEEKDAY = "weekday"  # one specific day of the week
    ANY_WEEKDAY = "any_weekday"  # Monday through Friday


_UNIT_SECONDS = {
    IntervalKind.SECONDS: 1,
    IntervalKind.MINUTES: 60,
    IntervalKind.HOURS: 3600,
    IntervalKind.DAYS: 86400,
    IntervalKind.WEEKS: 7 * 86400,
}

DURATION_KINDS = frozenset(_UNIT_SECONDS)

# keeps every boundary the resolver computes inside the datetime range
MAX_SPAN = timedelta(days=366_000)


@dataclass(frozen=True)
class Interval:
    """A cadence description. Build with the helpers below, not directly."""

    kind: IntervalKind
    count: int = 1
    day: Weekday | None = None

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 0:
            raise IntervalError(
                f"Interval count must be a non-negative integer, got {self.count!r}",
                field="count",
                value=self.count,
            )
        span = self.count * _UNIT_SECONDS.get(self.kind, 0)
        if span > MAX_SPAN.total_seconds():
            raise IntervalError(
                f"Interval of {self.count} {self.kind.value} is longer than {MAX_SPAN.days} days",
                field="count",
                value=self.count,
            )
        if (self.kind == IntervalKind.WEEKDAY) != (self.day is not None):
            raise IntervalError(
                "A weekday must be given exactly for weekday intervals",
                field="day",
                value=self.day,
            )

    @property
    def is_duration(self) -> bool:
        """True for seconds/minutes/hours/days/weeks."""
        return self.kind in DURATION_KINDS

    @property
    def is_day_or_coarser(self) -> bool:
        return self.kind not in (IntervalKind.SECONDS, IntervalKind.MINUTES, IntervalKind.HOURS)

    @property
    def is_degenerate(self) -> bool:
        """A zero-count duration never advances."""
        return self.is_duration and self.count == 0

    @property
    def unit_seconds(self) -> int | None:
        return _UNIT_SECONDS.get(self.kind)

    @property
    def duration(self) -> timedelta | None:
        """Length of one step for duration intervals, ``None`` for weekdays."""
        if not self.is_duration:
            return None
        return timedelta(seconds=self.count * _UNIT_SECONDS[self.kind])

    def __str__(self) -> str:
        if self.kind == IntervalKind.WEEKDAY:
            return self.day.value.capitalize()
        if self.kind == IntervalKind.ANY_WEEKDAY:
            return "Weekday"
        return f"{self.count} {self.kind.value}"


def seconds(n: int) -> Interval:
    return Interval(IntervalKind.SECONDS, n)


def minutes(n: int) -> Interval:
    return Interval(IntervalKind.MINUTES, n)


def hours(n: int) -> Interval:
    return Interval(IntervalKind.HOURS, n)


def days(n: int) -> Interval:
    return Interval(IntervalKind.DAYS, n)


def weeks(n: int) -> Interval:
    return Interval(IntervalKind.WEEKS, n)


second = seconds
minute = minutes
hour = hours
day = days
week = weeks


def on(weekday: Weekday | str) -> Interval:
    """Every given weekday, e.g. ``on("tuesday")``."""
    try:
        weekday = Weekday(weekday)
    except ValueError as e:
        raise IntervalError(f"Unknown weekday: {weekday!r}", field="day", value=weekday, cause=e) from e
    return Interval(IntervalKind.WEEKDAY, day=weekday)


MONDAY = on(Weekday.MONDAY)
TUESDAY = on(Weekday.TUESDAY)
WEDNESDAY = on(Weekday.WEDNESDAY)
THURSDAY = on(Weekday.THURSDAY)
FRIDAY = on(Weekday.FRIDAY)
SATURDAY = on(Weekday.SATURDAY)
SUNDAY = on(Weekday.SUNDAY)
WEEKDAY = Interval(IntervalKind.ANY_WEEKDAY)


__all__ = [
    "Interval",
    "IntervalKind",
    "Weekday",
    "DURATION_KINDS",
    "MAX_SPAN",
    "seconds",
    "minutes",
    "hours",
    "days",
    "weeks",
    "second",
    "minute",
    "hour",
    "day",
    "week",
    "on",
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
    "WEEKDAY",
]
