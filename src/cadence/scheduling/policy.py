"""Run policies: how many more times a schedule may fire.

Policies are immutable values. ``consume()`` returns the policy that
applies after one more execution; the job stores it.

::

    FOREVER ──consume──► FOREVER
    ONCE    ──consume──► EXHAUSTED
    countdown(3) ──► countdown(2) ──► countdown(1) ──► countdown(0) == exhausted
    EXHAUSTED ──consume──► EXHAUSTED      (terminal, no resurrection)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cadence.core.errors import ScheduleError


class PolicyKind(str, Enum):
    FOREVER = "forever"
    ONCE = "once"
    COUNTDOWN = "countdown"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class RunPolicy:
    """Remaining-runs budget for a schedule entry or a whole job."""

    kind: PolicyKind
    remaining: int | None = None

    def __post_init__(self) -> None:
        if self.kind == PolicyKind.COUNTDOWN:
            if isinstance(self.remaining, bool) or not isinstance(self.remaining, int) or self.remaining < 0:
                raise ScheduleError(
                    f"Run count must be a non-negative integer, got {self.remaining!r}"
                )
        elif self.remaining is not None:
            raise ScheduleError(f"{self.kind.value} policy takes no run count")

    @classmethod
    def countdown(cls, remaining: int) -> RunPolicy:
        return cls(PolicyKind.COUNTDOWN, remaining)

    def is_exhausted(self) -> bool:
        if self.kind == PolicyKind.COUNTDOWN:
            return self.remaining == 0
        return self.kind == PolicyKind.EXHAUSTED

    def consume(self) -> RunPolicy:
        """Return the policy after one execution."""
        if self.kind == PolicyKind.FOREVER:
            return self
        if self.kind == PolicyKind.COUNTDOWN and self.remaining > 0:
            return RunPolicy.countdown(self.remaining - 1)
        return EXHAUSTED

    def __str__(self) -> str:
        if self.kind == PolicyKind.COUNTDOWN:
            return f"countdown({self.remaining})"
        return self.kind.value


FOREVER = RunPolicy(PolicyKind.FOREVER)
ONCE = RunPolicy(PolicyKind.ONCE)
EXHAUSTED = RunPolicy(PolicyKind.EXHAUSTED)


__all__ = ["RunPolicy", "PolicyKind", "FOREVER", "ONCE", "EXHAUSTED"]
