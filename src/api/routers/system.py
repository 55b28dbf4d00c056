# This file defines the statistics, informational, sample data, and echo endpoints.
# It exists so the static page has capability metadata and simple payloads to render.
# Only the stats route reaches the store; the others are served from the service context alone.
# Echo returns a JSON body unchanged under `received`; any other content type echoes `{}`.

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from src.api.db_access import StoreError
from src.api.dependencies import get_system_service
from src.api.error_handlers import APIError, store_failure
from src.api.response_envelope import build_object_envelope, utc_now
from src.api.schemas.common import ErrorResponse
from src.api.schemas.system_schemas import (
    EchoResponse,
    InfoResponse,
    SampleDataResponse,
    StatsResponse,
    SystemInfoResponse,
)
from src.api.services.system_service import SystemService

router = APIRouter(tags=["system"])
SystemServiceDep = Annotated[SystemService, Depends(get_system_service)]


@router.get("/stats", response_model=StatsResponse, responses={500: {"model": ErrorResponse}})
def stats(service: SystemServiceDep) -> dict[str, object]:
    try:
        summary = service.get_stats()
    except StoreError as exc:
        raise store_failure(exc, service.config) from exc
    return build_object_envelope(stats=summary)


@router.get("/system-info", response_model=SystemInfoResponse)
def system_info(service: SystemServiceDep) -> dict[str, object]:
    return build_object_envelope(**service.get_system_info())


@router.get("/info", response_model=InfoResponse)
def info(service: SystemServiceDep) -> dict[str, object]:
    return build_object_envelope(**service.get_info())


@router.get("/data", response_model=SampleDataResponse)
def sample_data() -> dict[str, object]:
    return build_object_envelope(**SystemService.get_sample_data())


def _is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def _read_echo_body(request: Request) -> Any:
    if not _is_json_content_type(request.headers.get("content-type", "")):
        return {}
    if not await request.body():
        return {}
    try:
        return await request.json()
    except ValueError as exc:
        raise APIError(
            status_code=400,
            error_code="VALIDATION_ERROR",
            message="Request body is not valid JSON.",
            details=str(exc),
        ) from exc


@router.post(
    "/echo",
    response_model=EchoResponse,
    responses={400: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {"content": {"application/json": {"schema": {}}}, "required": False}
    },
)
async def echo(request: Request) -> dict[str, object]:
    return build_object_envelope(
        received=await _read_echo_body(request),
        echoed_at=utc_now(),
        message="Data received successfully",
    )
