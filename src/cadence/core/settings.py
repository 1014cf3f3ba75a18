"""Environment-driven settings for cadence.

``CadenceSettings`` collects the handful of knobs a host application may
want to set without touching code: the scheduler's time zone, the
background polling cadence, how long ``stop()`` may wait for the polling
thread and the logging setup.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** bad values fail at startup, not mid-poll
    - **Environment-driven:** reads ``CADENCE_*`` env vars and ``.env``
    - **Sensible defaults:** local time zone, 1 second polling

Examples:
    >>> from cadence.core.settings import CadenceSettings
    >>> settings = CadenceSettings(timezone="Europe/Berlin")
    >>> scheduler = Scheduler.from_settings(settings)   # also applies log_level/log_json

Tags:
    settings, configuration, pydantic, environment, cadence

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CadenceSettings(BaseSettings):
    """Scheduler settings.

    Fields
    ──────
    timezone              : IANA zone name; ``None`` means the local zone
    poll_interval_seconds : Sleep between background ``run_pending`` calls
    stop_timeout_seconds  : Max wait in ``WatchHandle.stop()``; ``None`` waits fully
    log_level             : Structlog log level
    log_json              : Force JSON (True) / console (False); ``None`` auto-detects
    """

    model_config = SettingsConfigDict(
        env_prefix="CADENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Scheduling ───────────────────────────────────────────────
    timezone: str | None = None
    poll_interval_seconds: float = Field(default=1.0, gt=0)
    stop_timeout_seconds: float | None = Field(default=None, gt=0)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level
