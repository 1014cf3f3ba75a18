"""Occurrence resolver: pure next/previous firing-instant computation.

Manifesto:
    A recurring job must fire on its own cadence, not on "whenever the
    last poll happened to notice it". Every instant this module returns
    is an absolute boundary (a multiple of the interval since a fixed
    origin, or an anchored clock time on a cadence day), so feeding a
    result back in as the next reference reproduces the same boundaries
    no matter how late or irregular polling is.

Architecture:
    ::

        next_occurrence(config, reference)
          │
          ├── truncate reference to whole seconds
          ├── degenerate interval (count 0)? ─────────────► None
          │
          ├── seconds/minutes/hours
          │     ├── no anchor ──► next absolute boundary
          │     └── anchor ─────► first anchor time at/after that boundary
          │
          ├── days/weeks/weekday/any-weekday
          │     └── first cadence date at anchor (or midnight)
          │         strictly after the reference
          │
          └── + adjustment (shifts the chosen instant, never the choice)

        following_occurrence(config, fired)
          └── next_occurrence(config, fired - adjustment)

    Boundary origins:
        seconds   wall-clock epoch 1970-01-01T00:00
        minutes   midnight of the reference day
        hours     midnight of the reference day
        days      proleptic Gregorian ordinal (0001-01-01 is day 1)
        weeks     Monday 0001-01-01 is week 0

Invariants:
    - ``next_occurrence(c, t) > t`` and ``prev_occurrence(c, t) < t``
      for any non-degenerate interval
    - results never carry microseconds
    - arithmetic is wall-clock in the reference's tzinfo; DST jumps are
      not compensated

Examples:
    >>> from datetime import UTC, datetime
    >>> config = RunConfig(minutes(10), adjustment=Adjustment.of(seconds(30)))
    >>> next_occurrence(config, datetime(2024, 6, 4, 12, 0, tzinfo=UTC))
    datetime.datetime(2024, 6, 4, 12, 10, 30, tzinfo=datetime.timezone.utc)

Tags:
    cadence, scheduling, resolver, drift-free, pure-functions

Doc-Types:
    api-reference, algorithm
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta

from cadence.core.errors import ScheduleError

from .intervals import Interval, IntervalKind
from .timeofday import normalize_time

_EPOCH = datetime(1970, 1, 1)
_DAY_SECONDS = 86400
_MIDNIGHT = time(0, 0)


# ---------------------------------------------------------------------------
# Value types owned by a schedule entry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Adjustment:
    """Extra duration added to every occurrence of one schedule entry."""

    offset: timedelta = timedelta(0)

    def __post_init__(self) -> None:
        if self.offset < timedelta(0):
            raise ScheduleError(f"Adjustment must not be negative, got {self.offset}")
        if self.offset.microseconds:
            raise ScheduleError("Adjustment must be a whole number of seconds")

    @classmethod
    def of(cls, *intervals: Interval) -> Adjustment:
        adjustment = cls()
        for interval in intervals:
            adjustment = adjustment.plus(interval)
        return adjustment

    def plus(self, interval: Interval) -> Adjustment:
        """Return a new adjustment extended by a duration interval."""
        if not interval.is_duration:
            raise ScheduleError(f"Cannot adjust by a weekday interval ({interval})")
        return Adjustment(self.offset + interval.duration)

    @property
    def seconds(self) -> int:
        return int(self.offset.total_seconds())


@dataclass(frozen=True)
class RepeatWindow:
    """Bounded burst of sub-occurrences following each primary occurrence."""

    interval: Interval
    times: int

    def __post_init__(self) -> None:
        if not self.interval.is_duration or self.interval.count == 0:
            raise ScheduleError(
                f"Repeat interval must be a non-zero duration, got {self.interval}"
            )
        if isinstance(self.times, bool) or not isinstance(self.times, int) or self.times < 1:
            raise ScheduleError(f"Repeat count must be a positive integer, got {self.times!r}")


@dataclass(frozen=True)
class RunConfig:
    """Interval plus its optional time-of-day anchor and adjustment."""

    interval: Interval
    anchor: time | None = None
    adjustment: Adjustment | None = None

    def with_time(self, anchor: time) -> RunConfig:
        return replace(self, anchor=normalize_time(anchor))

    def with_adjustment(self, interval: Interval) -> RunConfig:
        base = self.adjustment or Adjustment()
        return replace(self, adjustment=base.plus(interval))

    def next(self, reference: datetime) -> datetime | None:
        return next_occurrence(self, reference)

    def prev(self, reference: datetime) -> datetime | None:
        return prev_occurrence(self, reference)

    def following(self, occurrence: datetime) -> datetime | None:
        return following_occurrence(self, occurrence)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def truncate(moment: datetime) -> datetime:
    """Drop sub-second precision."""
    return moment.replace(microsecond=0)


def next_occurrence(config: RunConfig, reference: datetime) -> datetime | None:
    """Earliest firing instant strictly after ``reference``.

    Returns ``None`` for a degenerate (zero-count) interval, which never
    advances.
    """
    interval = config.interval
    if interval.is_degenerate:
        return None

    ref = truncate(reference)
    if interval.is_day_or_coarser:
        found = _next_on_cadence_date(interval, config.anchor or _MIDNIGHT, ref)
    else:
        found = _next_boundary(interval, ref)
        if config.anchor is not None:
            found = _anchor_at_or_after(found, config.anchor)

    if config.adjustment is not None:
        found = found + config.adjustment.offset
    return found


def prev_occurrence(config: RunConfig, reference: datetime) -> datetime | None:
    """Latest firing instant strictly before ``reference``.

    The search runs against ``reference - adjustment`` so the shifted
    result stays strictly earlier than ``reference``.
    """
    interval = config.interval
    if interval.is_degenerate:
        return None

    offset = config.adjustment.offset if config.adjustment is not None else timedelta(0)
    ref = truncate(reference) - offset
    if interval.is_day_or_coarser:
        found = _prev_on_cadence_date(interval, config.anchor or _MIDNIGHT, ref)
    else:
        found = _prev_boundary(interval, ref)
        if config.anchor is not None:
            found = _anchor_at_or_before(found, config.anchor)
    return found + offset


def following_occurrence(config: RunConfig, occurrence: datetime) -> datetime | None:
    """Next firing after ``occurrence``, itself a firing of ``config``.

    ``occurrence`` already carries the adjustment, so the search restarts
    from its unshifted boundary. Feeding results back in therefore keeps
    the interval cadence whatever the size of the adjustment.
    """
    if config.adjustment is not None:
        occurrence = occurrence - config.adjustment.offset
    return next_occurrence(config, occurrence)


def repeat_occurrences(primary: datetime, window: RepeatWindow) -> list[datetime]:
    """The ``window.times`` sub-occurrences that follow ``primary``."""
    step = window.interval.duration
    return [primary + step * k for k in range(1, window.times + 1)]


# ---------------------------------------------------------------------------
# Sub-day boundaries
# ---------------------------------------------------------------------------


def _seconds_of_day(moment: datetime) -> int:
    return moment.hour * 3600 + moment.minute * 60 + moment.second


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _next_boundary(interval: Interval, ref: datetime) -> datetime:
    step = interval.count * interval.unit_seconds

    if interval.kind == IntervalKind.SECONDS:
        elapsed = int((ref.replace(tzinfo=None) - _EPOCH).total_seconds())
        return ref + timedelta(seconds=step - elapsed % step)

    # minutes and hours restart counting at every midnight
    sod = _seconds_of_day(ref)
    target = sod - sod % step + step
    if target >= _DAY_SECONDS:
        return _midnight(ref) + timedelta(days=1)
    return _midnight(ref) + timedelta(seconds=target)


def _prev_boundary(interval: Interval, ref: datetime) -> datetime:
    step = interval.count * interval.unit_seconds

    if interval.kind == IntervalKind.SECONDS:
        elapsed = int((ref.replace(tzinfo=None) - _EPOCH).total_seconds())
        return ref - timedelta(seconds=elapsed % step or step)

    sod = _seconds_of_day(ref)
    if sod == 0:
        last_of_previous_day = (_DAY_SECONDS - 1) // step * step
        return _midnight(ref) - timedelta(days=1) + timedelta(seconds=last_of_previous_day)
    return ref - timedelta(seconds=sod % step or step)


def _combine(day: date, anchor: time, like: datetime) -> datetime:
    return datetime.combine(day, anchor, tzinfo=like.tzinfo)


def _anchor_at_or_after(moment: datetime, anchor: time) -> datetime:
    candidate = _combine(moment.date(), anchor, moment)
    if candidate < moment:
        candidate = _combine(moment.date() + timedelta(days=1), anchor, moment)
    return candidate


def _anchor_at_or_before(moment: datetime, anchor: time) -> datetime:
    candidate = _combine(moment.date(), anchor, moment)
    if candidate > moment:
        candidate = _combine(moment.date() - timedelta(days=1), anchor, moment)
    return candidate


# ---------------------------------------------------------------------------
# Day-or-coarser cadences
# ---------------------------------------------------------------------------


def _week_index(day: date) -> int:
    """Weeks since Monday 0001-01-01."""
    return (day.toordinal() - 1) // 7


def _monday_of_week(index: int) -> date:
    return date.fromordinal(index * 7 + 1)


def _next_on_cadence_date(interval: Interval, anchor: time, ref: datetime) -> datetime:
    today = ref.date()
    kind = interval.kind

    if kind == IntervalKind.DAYS:
        n = interval.count
        ordinal = today.toordinal()
        first = ordinal if ordinal % n == 0 else ordinal - ordinal % n + n
        candidate = _combine(date.fromordinal(first), anchor, ref)
        if candidate <= ref:
            candidate = _combine(date.fromordinal(first + n), anchor, ref)
        return candidate

    if kind == IntervalKind.WEEKS:
        n = interval.count
        index = _week_index(today)
        first = index if index % n == 0 else index - index % n + n
        candidate = _combine(_monday_of_week(first), anchor, ref)
        if candidate <= ref:
            candidate = _combine(_monday_of_week(first + n), anchor, ref)
        return candidate

    if kind == IntervalKind.WEEKDAY:
        day = today + timedelta(days=(interval.day.number - today.weekday()) % 7)
        candidate = _combine(day, anchor, ref)
        if candidate <= ref:
            candidate = _combine(day + timedelta(days=7), anchor, ref)
        return candidate

    # ANY_WEEKDAY
    day = today
    while day.weekday() >= 5 or _combine(day, anchor, ref) <= ref:
        day += timedelta(days=1)
    return _combine(day, anchor, ref)


def _prev_on_cadence_date(interval: Interval, anchor: time, ref: datetime) -> datetime:
    today = ref.date()
    kind = interval.kind

    if kind == IntervalKind.DAYS:
        n = interval.count
        last = today.toordinal() - today.toordinal() % n
        candidate = _combine(date.fromordinal(last), anchor, ref)
        if candidate >= ref:
            candidate = _combine(date.fromordinal(last - n), anchor, ref)
        return candidate

    if kind == IntervalKind.WEEKS:
        n = interval.count
        index = _week_index(today)
        last = index - index % n
        candidate = _combine(_monday_of_week(last), anchor, ref)
        if candidate >= ref:
            candidate = _combine(_monday_of_week(last - n), anchor, ref)
        return candidate

    if kind == IntervalKind.WEEKDAY:
        day = today - timedelta(days=(today.weekday() - interval.day.number) % 7)
        candidate = _combine(day, anchor, ref)
        if candidate >= ref:
            candidate = _combine(day - timedelta(days=7), anchor, ref)
        return candidate

    day = today
    while day.weekday() >= 5 or _combine(day, anchor, ref) >= ref:
        day -= timedelta(days=1)
    return _combine(day, anchor, ref)


__all__ = [
    "Adjustment",
    "RepeatWindow",
    "RunConfig",
    "truncate",
    "next_occurrence",
    "prev_occurrence",
    "following_occurrence",
    "repeat_occurrences",
]
