# This file defines the health and store connectivity endpoints.
# It exists so orchestration checks and the frontend can see whether the store is reachable.
# A failed probe is reported as an unhealthy 500 payload instead of an exception.
# The service keeps running when the store is down, so these routes are the degraded-mode signal.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.api.db_access import StoreError
from src.api.dependencies import get_system_service
from src.api.error_handlers import store_failure
from src.api.response_envelope import build_object_envelope
from src.api.schemas.common import ErrorResponse
from src.api.schemas.health_schemas import DbTestResponse, HealthResponse
from src.api.services.system_service import SystemService

router = APIRouter(tags=["health"])
SystemServiceDep = Annotated[SystemService, Depends(get_system_service)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"model": HealthResponse}},
)
def health(service: SystemServiceDep) -> Any:
    config = service.config
    base = {
        "service": config.api_name,
        "timestamp": _utc_now(),
        "environment": config.environment,
        "uptime_seconds": service.context.uptime_seconds(),
    }
    try:
        latency_ms = service.ping_store()
    except StoreError as exc:
        payload = HealthResponse.model_validate(
            {
                **base,
                "success": False,
                "status": "unhealthy",
                "database": {
                    "status": "disconnected",
                    "error": None if config.is_production else exc.message,
                },
            }
        )
        return JSONResponse(status_code=500, content=jsonable_encoder(payload))

    return build_object_envelope(
        **base,
        status="healthy",
        database={"status": "connected", "latency_ms": max(latency_ms, 0.0)},
    )


@router.get(
    "/db-test",
    response_model=DbTestResponse,
    responses={500: {"model": ErrorResponse}},
)
def db_test(service: SystemServiceDep) -> dict[str, object]:
    try:
        row = service.get_store_time_and_version()
    except StoreError as exc:
        raise store_failure(
            exc, service.config, message="Could not connect to PostgreSQL."
        ) from exc

    return build_object_envelope(
        data=row,
        message="PostgreSQL connection succeeded",
    )
