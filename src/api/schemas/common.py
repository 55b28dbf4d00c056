# This file defines shared schema pieces reused by multiple API endpoints.
# It exists so the success flag and error payloads stay consistent across routes.
# Shared models reduce duplication and keep contract changes easier to review.
# These classes are also used by tests to validate response shape stability.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class SuccessFields(BaseModel):
    success: bool = True


class MessageFields(SuccessFields):
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error_code: str
    error: str
    details: Any | None = None
    request_id: str
    timestamp: datetime
    available_routes: list[str] | None = None
