"""Tests for time-of-day parsing."""

from datetime import time

import pytest

from cadence.core.errors import ErrorCategory, TimeParseError
from cadence.scheduling.timeofday import normalize_time, parse_time


class TestParseTime:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("14:52:13", time(14, 52, 13)),
            ("2:52 PM", time(14, 52)),
            ("3:20 pm", time(15, 20)),
            ("3:20pm", time(15, 20)),
            ("10:00 am", time(10, 0)),
            ("12:00 am", time(0, 0)),
            ("12:00 PM", time(12, 0)),
            ("11:59:59 pm", time(23, 59, 59)),
            ("00:00", time(0, 0)),
            ("0:00", time(0, 0)),
            ("23:59:59", time(23, 59, 59)),
            ("  9:05  ", time(9, 5)),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_time(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "24:00",
            "13:00 pm",
            "0:30 am",
            "9:60",
            "9:00:60",
            "9:5",
            "123:00",
            "14:20:17:00",
            "1:00 xm",
            "noon",
            "",
            "\u0661\u0662:\u0663\u0660",  # Arabic-Indic digits
            "\uff19:\uff10\uff10",  # fullwidth digits
        ],
    )
    def test_invalid(self, text):
        with pytest.raises(TimeParseError) as exc_info:
            parse_time(text)
        err = exc_info.value
        assert err.value == text
        assert err.field == "time"
        assert err.category == ErrorCategory.VALIDATION

    def test_rejects_non_string(self):
        with pytest.raises(TimeParseError):
            parse_time(930)


class TestNormalizeTime:
    def test_drops_microseconds(self):
        assert normalize_time(time(10, 0, 5, 999)) == time(10, 0, 5)
