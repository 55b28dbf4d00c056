# This file defines the service context owned by one running API instance.
# It exists so the connection pool, configuration, and start timestamp are constructed explicitly.
# The app factory receives a context and every dependency resolves its collaborators from it.
# Tests build their own context with fake clients instead of patching module globals.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from src.api.api_config import ApiConfig, get_api_config
from src.api.db_access import DatabaseClient


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ServiceContext:
    """Process state shared by every request handled by one app instance."""

    config: ApiConfig
    db: DatabaseClient
    started_at: datetime = field(default_factory=_utc_now)
    store_ready_at_startup: bool | None = None

    @classmethod
    def from_config(cls, config: ApiConfig | None = None) -> ServiceContext:
        resolved = config or get_api_config()
        return cls(config=resolved, db=DatabaseClient.from_config(resolved))

    def uptime_seconds(self, now: datetime | None = None) -> float:
        current = now or _utc_now()
        return max((current - self.started_at).total_seconds(), 0.0)


def format_uptime(total_seconds: float) -> str:
    """Render seconds as `<d>d <h>h <m>m <s>s`."""

    seconds = int(total_seconds)
    days, remainder = divmod(seconds, 24 * 3600)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{days}d {hours}h {minutes}m {seconds}s"
