"""
Structured error types for cadence.

Every error raised by the scheduler is a ``CadenceError`` carrying a
category, structured context and an optional chained cause, so callers can
log or route failures without parsing messages.

Manifesto:
    - **Typed hierarchy:** validation problems, scheduling misuse and
      configuration mistakes are different types
    - **Fail at construction:** malformed input is rejected while the
      schedule is being built, never while it is being polled
    - **Rich context:** errors carry the offending field and value
    - **Error chaining:** wrapped exceptions stay reachable via ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────┐
        │                      CadenceError                        │
        │            (category, context, cause)                    │
        ├─────────────────────────────────────────────────────────┤
        │                                                          │
        │  ValidationError       ScheduleError      ConfigError    │
        │  (VALIDATION)          (SCHEDULING)       (CONFIG)       │
        │       │                                                  │
        │  IntervalError                                           │
        │  TimeParseError                                          │
        │  SerializationError                                      │
        └─────────────────────────────────────────────────────────┘

What is NOT an error:
    - A zero-count interval (``every(seconds(0))``) is accepted and simply
      never becomes due.
    - Exceptions raised by job callbacks are never wrapped; they reach the
      caller of ``run_pending()`` unchanged.

Examples:
    >>> from cadence.core.errors import TimeParseError
    >>> err = TimeParseError("Unrecognised time of day: '25:00'", value="25:00")
    >>> err.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> err.to_dict()["value"]
    "'25:00'"

Tags:
    error-handling, exception-hierarchy, validation, cadence

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    VALIDATION = "VALIDATION"  # Malformed intervals, times, payloads
    SCHEDULING = "SCHEDULING"  # Invalid builder usage
    CONFIG = "CONFIG"  # Settings, time zones
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        job: Repr or name of the job being built or run
        entry: Index of the schedule entry within the job
        parameter: Builder argument or payload field that was rejected
        metadata: Additional key-value pairs
    """

    job: str | None = None
    entry: int | None = None
    parameter: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ["job", "entry", "parameter"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CadenceError(Exception):
    """
    Base exception for all cadence errors.

    Subclasses set ``default_category`` so each error knows where it
    belongs without callers passing it explicitly.

    Examples:
        >>> error = CadenceError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(job="nightly-report").context.job
        'nightly-report'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CadenceError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ScheduleError("bad window").with_context(entry=1)
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(CadenceError):
    """
    Input validation error.

    Raised while a schedule is being built; the schedule is left as it was
    before the failing call.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        if field is not None:
            self.context.parameter = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class IntervalError(ValidationError):
    """Interval unit count is not a non-negative integer."""


class TimeParseError(ValidationError):
    """Time-of-day text does not match ``H:MM[:SS] [am|pm]``."""

    def __init__(self, message: str, *, value: Any = None, **kwargs: Any):
        kwargs.setdefault("field", "time")
        super().__init__(message, value=value, **kwargs)


class SerializationError(ValidationError):
    """Structured payload could not be decoded into a value type."""


# =============================================================================
# SCHEDULING / CONFIGURATION ERRORS
# =============================================================================


class ScheduleError(CadenceError):
    """Invalid schedule construction (bad repeat window, weekday adjustment...)."""

    default_category = ErrorCategory.SCHEDULING


class ConfigError(CadenceError):
    """Configuration error, e.g. an unknown time zone name."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None, **kwargs: Any):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}", **kwargs)


__all__ = [
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
]
