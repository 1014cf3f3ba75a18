"""Scheduling package: intervals, occurrence resolution, jobs and schedulers.

┌──────────────────────────────────────────────────────────────────────────────┐
│  intervals        Interval value types and helpers (minutes(5), TUESDAY)      │
│  timeofday        "H:MM[:SS] [am|pm]" parsing                                 │
│  policy           RunPolicy: forever / once / countdown / exhausted           │
│  resolver         next_occurrence / prev_occurrence (drift-free boundaries)   │
│  job              ScheduleEntry, SyncJob, AsyncJob (builder + state machine)  │
│  scheduler        Scheduler.run_pending / watch_thread                        │
│  async_scheduler  AsyncScheduler.run_pending -> tasks, async watch            │
│  watch            WatchHandle background thread                               │
│  serialization    pydantic wire forms of the value types                      │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from .async_scheduler import AsyncScheduler
from .intervals import (
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    THURSDAY,
    TUESDAY,
    WEDNESDAY,
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
from .job import AsyncJob, Job, Repeating, ScheduleEntry, SyncJob
from .policy import EXHAUSTED, FOREVER, ONCE, PolicyKind, RunPolicy
from .resolver import (
    Adjustment,
    RepeatWindow,
    RunConfig,
    following_occurrence,
    next_occurrence,
    prev_occurrence,
    repeat_occurrences,
)
from .scheduler import BaseScheduler, Scheduler
from .serialization import (
    dump_adjustment,
    dump_interval,
    dump_policy,
    load_adjustment,
    load_interval,
    load_policy,
)
from .timeofday import parse_time
from .watch import WatchHandle, WatchHealth

__all__ = [
    # intervals
    "Interval",
    "IntervalKind",
    "Weekday",
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
    # time of day
    "parse_time",
    # policy
    "RunPolicy",
    "PolicyKind",
    "FOREVER",
    "ONCE",
    "EXHAUSTED",
    # resolver
    "Adjustment",
    "RepeatWindow",
    "RunConfig",
    "next_occurrence",
    "prev_occurrence",
    "following_occurrence",
    "repeat_occurrences",
    # jobs and schedulers
    "ScheduleEntry",
    "Repeating",
    "Job",
    "SyncJob",
    "AsyncJob",
    "BaseScheduler",
    "Scheduler",
    "AsyncScheduler",
    "WatchHandle",
    "WatchHealth",
    # serialization
    "dump_interval",
    "load_interval",
    "dump_policy",
    "load_policy",
    "dump_adjustment",
    "load_adjustment",
]
