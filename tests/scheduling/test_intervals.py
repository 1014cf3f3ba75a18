"""Tests for interval value types and helpers."""

from datetime import date, timedelta

import pytest

from cadence.core.errors import IntervalError
from cadence.scheduling.intervals import (
    MAX_SPAN,
    MONDAY,
    SUNDAY,
    TUESDAY,
    WEEKDAY,
    Interval,
    IntervalKind,
    Weekday,
    day,
    days,
    hour,
    hours,
    minute,
    minutes,
    on,
    second,
    seconds,
    week,
    weeks,
)


class TestHelpers:
    def test_duration_helpers(self):
        assert seconds(5) == Interval(IntervalKind.SECONDS, 5)
        assert minutes(10) == Interval(IntervalKind.MINUTES, 10)
        assert hours(2) == Interval(IntervalKind.HOURS, 2)
        assert days(3) == Interval(IntervalKind.DAYS, 3)
        assert weeks(4) == Interval(IntervalKind.WEEKS, 4)

    def test_singular_aliases_are_identical(self):
        assert second(1) == seconds(1)
        assert minute(1) == minutes(1)
        assert hour(1) == hours(1)
        assert day(1) == days(1)
        assert week(1) == weeks(1)

    def test_weekday_constants(self):
        assert TUESDAY == on("tuesday") == on(Weekday.TUESDAY)
        assert TUESDAY.kind == IntervalKind.WEEKDAY
        assert TUESDAY.day == Weekday.TUESDAY
        assert WEEKDAY.kind == IntervalKind.ANY_WEEKDAY

    def test_unknown_weekday_name(self):
        with pytest.raises(IntervalError) as exc_info:
            on("funday")
        assert exc_info.value.field == "day"


class TestValidation:
    def test_zero_count_is_allowed(self):
        interval = seconds(0)
        assert interval.is_degenerate

    @pytest.mark.parametrize("count", [-1, 1.5, "3", True, None])
    def test_count_must_be_non_negative_int(self, count):
        with pytest.raises(IntervalError):
            Interval(IntervalKind.MINUTES, count)

    @pytest.mark.parametrize(
        "interval_factory, count",
        [(days, 10**9), (weeks, 10**8), (hours, 10**8), (seconds, 10**12), (days, MAX_SPAN.days + 1)],
    )
    def test_span_is_capped(self, interval_factory, count):
        with pytest.raises(IntervalError) as exc_info:
            interval_factory(count)
        assert exc_info.value.field == "count"
        assert exc_info.value.value == count

    def test_longest_allowed_spans(self):
        assert days(MAX_SPAN.days).duration == MAX_SPAN
        assert weeks(MAX_SPAN.days // 7).duration <= MAX_SPAN

    def test_weekday_requires_day(self):
        with pytest.raises(IntervalError):
            Interval(IntervalKind.WEEKDAY)

    def test_day_only_for_weekday_kind(self):
        with pytest.raises(IntervalError):
            Interval(IntervalKind.DAYS, 1, day=Weekday.MONDAY)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            minutes(5).count = 6


class TestProperties:
    def test_duration(self):
        assert minutes(10).duration == timedelta(minutes=10)
        assert weeks(2).duration == timedelta(days=14)
        assert TUESDAY.duration is None
        assert WEEKDAY.duration is None

    def test_is_duration(self):
        assert hours(1).is_duration
        assert not MONDAY.is_duration
        assert not WEEKDAY.is_duration

    def test_is_day_or_coarser(self):
        assert not seconds(1).is_day_or_coarser
        assert not hours(23).is_day_or_coarser
        assert days(1).is_day_or_coarser
        assert weeks(1).is_day_or_coarser
        assert SUNDAY.is_day_or_coarser
        assert WEEKDAY.is_day_or_coarser

    def test_weekdays_are_never_degenerate(self):
        assert not TUESDAY.is_degenerate
        assert not days(1).is_degenerate
        assert days(0).is_degenerate

    def test_str(self):
        assert str(minutes(15)) == "15 minutes"
        assert str(TUESDAY) == "Tuesday"
        assert str(WEEKDAY) == "Weekday"


class TestWeekday:
    def test_numbers_match_date_weekday(self):
        assert Weekday.MONDAY.number == 0
        assert Weekday.SUNDAY.number == 6

    def test_of_date(self):
        assert Weekday.of(date(2024, 6, 4)) == Weekday.TUESDAY
        assert Weekday.of(date(2024, 6, 9)) == Weekday.SUNDAY

    def test_is_workday(self):
        assert Weekday.FRIDAY.is_workday
        assert not Weekday.SATURDAY.is_workday
