"""Tests for cadence.core.clock module."""

import threading
import zoneinfo
from datetime import UTC, datetime, timedelta, timezone, tzinfo

import pytest

from cadence.core.clock import (
    Clock,
    LocalTimezone,
    ManualClock,
    SystemClock,
    local_timezone,
    resolve_timezone,
)
from cadence.core.errors import ConfigError, InvalidConfigError

START = datetime(2024, 6, 4, 12, 0, tzinfo=UTC)


class TestSystemClock:
    def test_implements_protocol(self):
        assert isinstance(SystemClock(), Clock)

    def test_now_is_aware_and_in_requested_zone(self):
        tz = timezone(timedelta(hours=2))
        now = SystemClock().now(tz)
        assert now.tzinfo is tz
        assert abs((now - datetime.now(UTC)).total_seconds()) < 5


class TestManualClock:
    def test_implements_protocol(self):
        assert isinstance(ManualClock(START), Clock)

    def test_requires_aware_start(self):
        with pytest.raises(ValueError):
            ManualClock(datetime(2024, 6, 4, 12, 0))

    def test_time_stands_still(self):
        clock = ManualClock(START)
        assert clock.now(UTC) == START
        assert clock.now(UTC) == START

    def test_advance(self):
        clock = ManualClock(START)
        clock.advance(timedelta(minutes=10))
        assert clock.now(UTC) == datetime(2024, 6, 4, 12, 10, tzinfo=UTC)

    def test_set_may_move_backwards(self):
        clock = ManualClock(START)
        earlier = START - timedelta(days=1)
        clock.set(earlier)
        assert clock.now(UTC) == earlier

    def test_set_rejects_naive(self):
        with pytest.raises(ValueError):
            ManualClock(START).set(datetime(2024, 6, 4))

    def test_now_converts_zone(self):
        berlin = zoneinfo.ZoneInfo("Europe/Berlin")
        now = ManualClock(START).now(berlin)
        assert now.tzinfo is berlin
        assert (now.hour, now.minute) == (14, 0)

    def test_concurrent_advance(self):
        clock = ManualClock(START)

        def bump():
            for _ in range(100):
                clock.advance(timedelta(seconds=1))

        threads = [threading.Thread(target=bump) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert clock.now(UTC) == START + timedelta(seconds=400)


class TestResolveTimezone:
    def test_none_is_local_zone(self):
        tz = resolve_timezone(None)
        assert isinstance(tz, tzinfo)
        assert tz.utcoffset(None) == local_timezone().utcoffset(None)

    def test_tzinfo_passes_through(self):
        assert resolve_timezone(UTC) is UTC

    def test_iana_name(self):
        assert resolve_timezone("Europe/Berlin") == zoneinfo.ZoneInfo("Europe/Berlin")

    def test_unknown_name_raises_config_error(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            resolve_timezone("Mars/Olympus_Mons")
        assert isinstance(exc_info.value, ConfigError)
        assert exc_info.value.key == "timezone"
        assert exc_info.value.__cause__ is not None


class TestLocalTimezone:
    """The local zone follows the host's DST rules per instant."""

    def test_offsets_follow_dst(self, host_timezone):
        host_timezone("America/New_York")
        tz = LocalTimezone()
        assert tz.utcoffset(datetime(2026, 7, 1, 12, 0)) == timedelta(hours=-4)
        assert tz.utcoffset(datetime(2026, 11, 5, 12, 0)) == timedelta(hours=-5)
        assert tz.dst(datetime(2026, 7, 1, 12, 0)) == timedelta(hours=1)
        assert tz.dst(datetime(2026, 11, 5, 12, 0)) == timedelta(0)
        assert tz.tzname(datetime(2026, 7, 1, 12, 0)) == "EDT"
        assert tz.tzname(datetime(2026, 11, 5, 12, 0)) == "EST"

    def test_conversion_from_utc(self, host_timezone):
        host_timezone("America/New_York")
        tz = local_timezone()
        summer = datetime(2026, 7, 1, 16, 0, tzinfo=UTC).astimezone(tz)
        winter = datetime(2026, 11, 5, 16, 0, tzinfo=UTC).astimezone(tz)
        assert (summer.hour, summer.utcoffset()) == (12, timedelta(hours=-4))
        assert (winter.hour, winter.utcoffset()) == (11, timedelta(hours=-5))

    def test_matches_iana_zone(self, host_timezone):
        host_timezone("Europe/Berlin")
        berlin = zoneinfo.ZoneInfo("Europe/Berlin")
        for month in (1, 4, 7, 10, 12):
            wall = datetime(2025, month, 15, 9, 30)
            assert wall.replace(tzinfo=LocalTimezone()) == wall.replace(tzinfo=berlin)

    def test_offset_without_datetime(self, host_timezone):
        host_timezone("UTC")
        assert LocalTimezone().utcoffset(None) == timedelta(0)
