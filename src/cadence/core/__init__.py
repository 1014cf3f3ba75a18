"""Core primitives shared by the scheduling package: errors, logging, settings, clock."""

from .clock import (
    Clock,
    LocalTimezone,
    ManualClock,
    SystemClock,
    local_timezone,
    resolve_timezone,
)
from .errors import (
    CadenceError,
    ConfigError,
    ErrorCategory,
    ErrorContext,
    IntervalError,
    InvalidConfigError,
    ScheduleError,
    SerializationError,
    TimeParseError,
    ValidationError,
)
from .logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    unbind_context,
)
from .settings import CadenceSettings

__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "LocalTimezone",
    "local_timezone",
    "resolve_timezone",
    "ErrorCategory",
    "ErrorContext",
    "CadenceError",
    "ValidationError",
    "IntervalError",
    "TimeParseError",
    "SerializationError",
    "ScheduleError",
    "ConfigError",
    "InvalidConfigError",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
    "CadenceSettings",
]
