# This file builds success payloads for API endpoints in a consistent format.
# It exists so every response carries the `success` flag the frontend checks first.
# The helpers return plain dictionaries that Pydantic response models validate at runtime.
# This keeps endpoint functions focused on data retrieval instead of repetitive payload assembly.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any


def utc_now() -> datetime:
    """Return timezone-aware UTC timestamp for response generation."""

    return datetime.now(tz=UTC)


def build_object_envelope(**fields: Any) -> dict[str, Any]:
    """Build a successful non-list payload."""

    return {"success": True, **fields}


def build_list_envelope(*, key: str, rows: list[dict[str, Any]], **fields: Any) -> dict[str, Any]:
    """Build a successful list payload with a row count."""

    return {"success": True, "count": len(rows), key: rows, **fields}
