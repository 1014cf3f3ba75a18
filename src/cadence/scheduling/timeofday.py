"""Time-of-day anchors: parsing ``"H:MM[:SS] [am|pm]"`` into ``datetime.time``.

Grammar (case-insensitive, surrounding whitespace ignored)::

    time     := hour ":" minute [":" second] [ws* meridiem]
    hour     := 1-2 digits
    minute   := 2 digits
    second   := 2 digits
    meridiem := "am" | "pm"

Without a meridiem the hour is 0-23. With one it is 1-12, where
``12 am`` is midnight and ``12 pm`` is noon.

Examples:
    >>> parse_time("14:52:13")
    datetime.time(14, 52, 13)
    >>> parse_time("2:52 PM")
    datetime.time(14, 52)
"""

from __future__ import annotations

import re
from datetime import time

from cadence.core.errors import TimeParseError

_TIME_RE = re.compile(
    r"^\s*(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?\s*(?P<meridiem>[ap]m)?\s*$",
    re.IGNORECASE | re.ASCII,
)


def parse_time(text: str) -> time:
    """Parse a textual time of day.

    Raises:
        TimeParseError: If ``text`` does not follow the grammar or names an
            impossible time (``"24:00"``, ``"13:00 pm"``, ``"9:60"``).
    """
    if not isinstance(text, str):
        raise TimeParseError(f"Time of day must be a string, got {type(text).__name__}", value=text)

    match = _TIME_RE.match(text)
    if match is None:
        raise TimeParseError(
            f"Unrecognised time of day {text!r}; expected H:MM[:SS] [am|pm]", value=text
        )

    hour = int(match["hour"])
    minute = int(match["minute"])
    second = int(match["second"] or 0)
    meridiem = (match["meridiem"] or "").lower()

    if meridiem:
        if not 1 <= hour <= 12:
            raise TimeParseError(f"Hour out of range for 12-hour time {text!r}", value=text)
        hour = hour % 12 + (12 if meridiem == "pm" else 0)
    elif hour > 23:
        raise TimeParseError(f"Hour out of range in {text!r}", value=text)

    if minute > 59 or second > 59:
        raise TimeParseError(f"Minute or second out of range in {text!r}", value=text)

    return time(hour, minute, second)


def normalize_time(value: time) -> time:
    """Drop sub-second precision and tzinfo from a structured anchor."""
    return value.replace(microsecond=0, tzinfo=None)
