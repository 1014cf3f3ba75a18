"""Structured encoding of interval, run-policy and adjustment values.

Payloads are plain dicts (JSON-ready), validated by pydantic models with
``extra="forbid"``::

    {"kind": "minutes", "count": 15}
    {"kind": "weekday", "day": "tuesday"}
    {"kind": "any_weekday"}

    {"kind": "forever"}        {"kind": "once"}
    {"kind": "countdown", "remaining": 3}
    {"kind": "exhausted"}

    {"seconds": 30}

Any rejected payload raises ``SerializationError`` chained to the
underlying ``pydantic.ValidationError``.

Tags:
    cadence, serialization, pydantic, json

Doc-Types:
    api-reference, data-format
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, model_validator

from cadence.core.errors import CadenceError, SerializationError

from .intervals import Interval, IntervalKind, Weekday
from .policy import PolicyKind, RunPolicy
from .resolver import Adjustment


class IntervalModel(BaseModel):
    """Wire form of an ``Interval``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: IntervalKind
    count: int | None = Field(default=None, ge=0, strict=True)
    day: Weekday | None = None

    @model_validator(mode="after")
    def validate_shape(self) -> IntervalModel:
        if self.kind == IntervalKind.WEEKDAY:
            if self.day is None or self.count is not None:
                raise ValueError("weekday intervals take a 'day' and no 'count'")
        elif self.kind == IntervalKind.ANY_WEEKDAY:
            if self.day is not None or self.count is not None:
                raise ValueError("any_weekday intervals take no fields")
        elif self.count is None or self.day is not None:
            raise ValueError(f"{self.kind.value} intervals take a 'count' and no 'day'")
        return self

    @classmethod
    def from_interval(cls, interval: Interval) -> IntervalModel:
        if interval.kind == IntervalKind.WEEKDAY:
            return cls(kind=interval.kind, day=interval.day)
        if interval.kind == IntervalKind.ANY_WEEKDAY:
            return cls(kind=interval.kind)
        return cls(kind=interval.kind, count=interval.count)

    def to_interval(self) -> Interval:
        if self.kind == IntervalKind.WEEKDAY:
            return Interval(self.kind, day=self.day)
        if self.kind == IntervalKind.ANY_WEEKDAY:
            return Interval(self.kind)
        return Interval(self.kind, self.count)


class RunPolicyModel(BaseModel):
    """Wire form of a ``RunPolicy``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: PolicyKind
    remaining: int | None = Field(default=None, ge=0, strict=True)

    @model_validator(mode="after")
    def validate_remaining(self) -> RunPolicyModel:
        if (self.kind == PolicyKind.COUNTDOWN) != (self.remaining is not None):
            raise ValueError("'remaining' is required for countdown and only for countdown")
        return self

    @classmethod
    def from_policy(cls, policy: RunPolicy) -> RunPolicyModel:
        return cls(kind=policy.kind, remaining=policy.remaining)

    def to_policy(self) -> RunPolicy:
        return RunPolicy(self.kind, self.remaining)


class AdjustmentModel(BaseModel):
    """Wire form of an ``Adjustment``: whole seconds."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    seconds: int = Field(ge=0, strict=True)

    def to_adjustment(self) -> Adjustment:
        return Adjustment(timedelta(seconds=self.seconds))


def _load(model: type[BaseModel], payload: Any, what: str) -> BaseModel:
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise SerializationError(
            f"Invalid {what} payload: {e.error_count()} validation error(s)",
            field=what,
            value=payload,
            cause=e,
        ) from e


def dump_interval(interval: Interval) -> dict[str, Any]:
    return IntervalModel.from_interval(interval).model_dump(mode="json", exclude_none=True)


def load_interval(payload: Any) -> Interval:
    model = _load(IntervalModel, payload, "interval")
    try:
        return model.to_interval()
    except CadenceError as e:
        raise SerializationError(str(e), field="interval", value=payload, cause=e) from e


def dump_policy(policy: RunPolicy) -> dict[str, Any]:
    return RunPolicyModel.from_policy(policy).model_dump(mode="json", exclude_none=True)


def load_policy(payload: Any) -> RunPolicy:
    return _load(RunPolicyModel, payload, "policy").to_policy()


def dump_adjustment(adjustment: Adjustment) -> dict[str, Any]:
    return {"seconds": adjustment.seconds}


def load_adjustment(payload: Any) -> Adjustment:
    return _load(AdjustmentModel, payload, "adjustment").to_adjustment()


__all__ = [
    "IntervalModel",
    "RunPolicyModel",
    "AdjustmentModel",
    "dump_interval",
    "load_interval",
    "dump_policy",
    "load_policy",
    "dump_adjustment",
    "load_adjustment",
]
