"""
Environment-driven configuration for the tracker.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel

ENV_PREFIX = "VOLUNTEER_TRACKER_"


class TrackerConfig(BaseModel):
    database_url: Optional[str] = None
    """SQLAlchemy URL of the attendance store; no store is wired when unset."""

    pool_pre_ping: bool = True

    timezone: str = "UTC"
    """Timezone used to decide what "today" is for the live dashboard."""

    log_level: str = "INFO"


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def load_config() -> TrackerConfig:
    defaults = TrackerConfig()
    return TrackerConfig(
        database_url=_env("DATABASE_URL") or defaults.database_url,
        pool_pre_ping=_env_bool("POOL_PRE_PING", defaults.pool_pre_ping),
        timezone=_env("TIMEZONE") or defaults.timezone,
        log_level=(_env("LOG_LEVEL") or defaults.log_level).upper(),
    )
