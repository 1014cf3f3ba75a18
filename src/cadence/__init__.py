"""cadence - in-process recurring job scheduler.

Manifesto:
    Recurring work inside a long-running process should not need a cron
    daemon, a broker or a database. Describe when a callback should run
    with a small fluent builder, then either poll the scheduler from your
    own loop or let a background thread (or an asyncio task) do it.

┌──────────────────────────────────────────────────────────────────────────────┐
│  CADENCE                                                                      │
│                                                                               │
│   Clock ──► Resolver ──► Job ──► Scheduler ──► WatchHandle                    │
│   (now)     (next/prev)  (state)  (run_pending)  (background thread)          │
│                                                                               │
│   scheduler = Scheduler(tz="Europe/Berlin")                                   │
│   scheduler.every(day(1)).at("10:00 am").run(send_digest)                     │
│   with scheduler.watch_thread(0.5):                                           │
│       ...                                                                     │
└──────────────────────────────────────────────────────────────────────────────┘

Tags:
    cadence, scheduling, jobs, fluent-api

Doc-Types:
    api-reference, package-overview
"""

from cadence.core.clock import Clock, ManualClock, SystemClock
from cadence.core.errors import (
    CadenceError,
    ConfigError,
    IntervalError,
    InvalidConfigError,
    ScheduleError,
    SerializationError,
    TimeParseError,
    ValidationError,
)
from cadence.core.settings import CadenceSettings
from cadence.scheduling import (
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    THURSDAY,
    TUESDAY,
    WEDNESDAY,
    WEEKDAY,
    AsyncJob,
    AsyncScheduler,
    Interval,
    RunPolicy,
    Scheduler,
    SyncJob,
    WatchHandle,
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

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Schedulers
    "Scheduler",
    "AsyncScheduler",
    "SyncJob",
    "AsyncJob",
    "WatchHandle",
    # Intervals
    "Interval",
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
    "RunPolicy",
    # Clock / settings
    "Clock",
    "SystemClock",
    "ManualClock",
    "CadenceSettings",
    # Errors
    "CadenceError",
    "ValidationError",
    "IntervalError",
    "TimeParseError",
    "SerializationError",
    "ScheduleError",
    "ConfigError",
    "InvalidConfigError",
]
