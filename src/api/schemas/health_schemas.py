# This file defines response schemas for the health and store connectivity endpoints.
# It exists to keep operational status contracts explicit for the frontend and monitoring checks.
# The health model carries store status and latency so degraded startup is visible to clients.
# Stable health schemas make container health checks straightforward to automate.

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from src.api.schemas.common import MessageFields, SuccessFields


class DatabaseStatus(BaseModel):
    status: Literal["connected", "disconnected"]
    latency_ms: float | None = Field(default=None, ge=0)
    error: str | None = None


class HealthResponse(SuccessFields):
    service: str
    status: Literal["healthy", "unhealthy"]
    timestamp: datetime
    database: DatabaseStatus
    environment: str
    uptime_seconds: float = Field(ge=0)


class DbTestData(BaseModel):
    current_time: datetime
    postgres_version: str


class DbTestResponse(MessageFields):
    data: DbTestData
