# This file builds the FastAPI application and registers all API routers.
# It exists so startup behavior, middleware, and error handling are configured in one place.
# The app logs every request, adds request IDs and timing headers, and records Prometheus metrics.
# Startup waits a bounded number of times for the store but never refuses to serve.

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import RequestResponseEndpoint

from src.api.error_handlers import register_error_handlers
from src.api.routers.health import router as health_router
from src.api.routers.products import router as products_router
from src.api.routers.system import router as system_router
from src.api.routers.users import router as users_router
from src.api.service_context import ServiceContext
from src.common.logging import configure_logging

LOGGER = logging.getLogger("api")
REQUEST_LOGGER = logging.getLogger("api.requests")

API_HTTP_REQUESTS_TOTAL = Counter(
    "api_http_requests_total",
    "Total number of HTTP requests processed by the API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "api_http_request_duration_seconds",
    "API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "api_http_inflight_requests",
    "Number of API requests currently being processed.",
    ["method"],
)


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


def create_app(context: ServiceContext | None = None) -> FastAPI:
    """Create configured FastAPI application instance bound to one service context."""

    configure_logging()
    service_context = context or ServiceContext.from_config()
    config = service_context.config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        service_context.store_ready_at_startup = await run_in_threadpool(
            service_context.db.wait_until_ready,
            attempts=config.db_connect_attempts,
            delay_seconds=config.db_connect_delay_seconds,
        )
        LOGGER.info(
            "%s %s listening on %s:%d (environment=%s, store_ready=%s)",
            config.api_name,
            config.app_version,
            config.host,
            config.port,
            config.environment,
            service_context.store_ready_at_startup,
        )
        try:
            yield
        finally:
            LOGGER.info("Shutting down; closing store connections")
            service_context.db.dispose()

    app = FastAPI(
        title=config.api_name,
        description=config.description,
        version=config.app_version,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Service status and store connectivity."},
            {"name": "users", "description": "User CRUD backed by the store."},
            {"name": "products", "description": "Read-only seeded product catalog."},
            {"name": "system", "description": "Statistics, capability info, and sample payloads."},
        ],
    )
    app.state.context = service_context

    allow_any_origin = "*" in config.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_any_origin else config.allowed_origins,
        allow_credentials=not allow_any_origin,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        REQUEST_LOGGER.info(
            "%s - %s %s",
            datetime.now(tz=UTC).isoformat(),
            request.method,
            request.url.path,
        )

        method_label = request.method
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0

            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"
            REQUEST_LOGGER.debug(
                "%s %s -> %d in %.2f ms",
                request.method,
                request.url.path,
                status_code,
                duration_ms,
            )
            return response
        finally:
            duration_s = time.perf_counter() - started
            path_label = _route_label(request)
            API_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=path_label,
            ).observe(duration_s)
            API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(products_router)
    app.include_router(system_router)

    return app


app = create_app()
