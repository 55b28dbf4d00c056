# This file defines consistent API error payloads and exception handlers.
# It exists so every endpoint returns the same error shape with request trace fields.
# The handlers translate validation, routing, store, and unexpected failures into safe client messages.
# Diagnostic detail is attached only outside production and stack traces never leave the process.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.api_config import ApiConfig
from src.api.db_access import StoreError, StoreUnavailableError

LOGGER = logging.getLogger("api")


class APIError(Exception):
    """Domain error type with structured API details."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(message)


def store_failure(exc: StoreError, config: ApiConfig, *, message: str | None = None) -> APIError:
    """Build the 500 error for a store failure, hiding driver text in production."""

    if message is None:
        message = (
            "The database is not reachable."
            if isinstance(exc, StoreUnavailableError)
            else "The database operation failed."
        )
    LOGGER.error("Store failure: %s", exc.message)
    return APIError(
        status_code=500,
        error_code="STORE_ERROR",
        message=message,
        details=None if config.is_production else exc.message,
    )


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _is_production(request: Request) -> bool:
    context = getattr(request.app.state, "context", None)
    return bool(context is not None and context.config.is_production)


def _error_body(
    *, request: Request, error_code: str, message: str, details: Any | None = None
) -> dict[str, Any]:
    return {
        "success": False,
        "error_code": error_code,
        "error": message,
        "details": details,
        "request_id": _request_id(request),
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }


def known_routes(app: FastAPI) -> list[str]:
    """Return the documented route paths registered on the app, in registration order."""

    return list(app.openapi().get("paths", {}))


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code=exc.error_code,
                message=exc.message,
                details=exc.details,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=_error_body(
                request=request,
                error_code="VALIDATION_ERROR",
                message=_validation_message(exc),
                details=[
                    {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
                    for error in exc.errors()
                ],
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 404:
            body = _error_body(
                request=request,
                error_code="ROUTE_NOT_FOUND",
                message="Route not found.",
            )
            body["available_routes"] = known_routes(request.app)
            return JSONResponse(status_code=404, content=body)

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code="HTTP_ERROR",
                message=str(exc.detail),
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request=request,
                error_code="INTERNAL_SERVER_ERROR",
                message="The server encountered an unexpected error.",
                details=None if _is_production(request) else str(exc),
            ),
        )
