# This file implements the store probes and the informational payloads of the API.
# It exists so health, connectivity, and stats queries live beside the static capability catalog.
# Store-backed methods issue a single statement each; static payloads never touch the store.
# Uptime and start time come from the service context rather than a module global.

from __future__ import annotations

import platform
from datetime import UTC, datetime
from typing import Any

from src.api.service_context import ServiceContext, format_uptime

ENDPOINT_CATALOG: tuple[tuple[str, str, str], ...] = (
    ("GET", "/health", "Service status and store connectivity"),
    ("GET", "/db-test", "PostgreSQL connectivity test"),
    ("GET", "/users", "List all users"),
    ("GET", "/users/{user_id}", "Get a user by id"),
    ("POST", "/users", "Create a user"),
    ("PUT", "/users/{user_id}", "Update a user"),
    ("DELETE", "/users/{user_id}", "Delete a user"),
    ("GET", "/products", "List all products"),
    ("GET", "/stats", "System statistics"),
    ("GET", "/system-info", "Full API description"),
    ("GET", "/info", "Basic API information"),
    ("GET", "/data", "Sample data"),
    ("POST", "/echo", "Echo the posted payload"),
)

SAMPLE_ITEMS: tuple[dict[str, Any], ...] = (
    {"id": 1, "name": "Item A", "value": 100},
    {"id": 2, "name": "Item B", "value": 200},
    {"id": 3, "name": "Item C", "value": 300},
)

PROJECT_SERVICES: tuple[str, ...] = ("Backend API", "PostgreSQL", "Frontend Nginx")


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class SystemService:
    """Store probes, statistics, and static descriptions."""

    def __init__(self, *, context: ServiceContext) -> None:
        self.context = context
        self.config = context.config
        self.db = context.db
        self.users_table = self.config.validate_table_name(self.config.users_table_name)
        self.products_table = self.config.validate_table_name(self.config.products_table_name)

    def ping_store(self) -> float:
        return self.db.ping()

    def get_store_time_and_version(self) -> dict[str, Any]:
        row = self.db.fetch_one("SELECT NOW() AS current_time, version() AS postgres_version")
        if row is None:
            raise RuntimeError("Store returned no row for the connectivity probe.")
        return row

    def get_stats(self) -> dict[str, Any]:
        query = f"""
        SELECT
            (SELECT COUNT(*) FROM {self.users_table}) AS user_count,
            (SELECT COUNT(*) FROM {self.products_table}) AS product_count,
            (SELECT COALESCE(SUM(stock), 0) FROM {self.products_table}) AS total_stock,
            version() AS postgres_version
        """
        row = self.db.fetch_one(query) or {}
        return {
            "users": {"total": int(row.get("user_count") or 0)},
            "products": {
                "total": int(row.get("product_count") or 0),
                "total_stock": int(row.get("total_stock") or 0),
            },
            "database": {
                "version": str(row.get("postgres_version") or "unknown"),
                "connection": "active",
            },
            "api": {
                "uptime": format_uptime(self.context.uptime_seconds()),
                "start_time": self.context.started_at,
                "environment": self.config.environment,
                "python_version": platform.python_version(),
            },
        }

    def get_system_info(self) -> dict[str, Any]:
        return {
            "service": self.config.api_name,
            "version": self.config.app_version,
            "description": self.config.description,
            "endpoints": [
                {"method": method, "path": path, "description": description}
                for method, path, description in ENDPOINT_CATALOG
            ],
            "database": {"type": "PostgreSQL", "host": self.config.database_host},
            "server": {
                "start_time": self.context.started_at,
                "uptime": format_uptime(self.context.uptime_seconds()),
                "python_version": platform.python_version(),
                "environment": self.config.environment,
            },
            "project": {
                "name": "Multi-container demo",
                "members": 3,
                "services": list(PROJECT_SERVICES),
            },
        }

    def get_info(self) -> dict[str, Any]:
        return {
            "service": self.config.api_name,
            "version": self.config.app_version,
            "endpoints": sorted({path for _, path, _ in ENDPOINT_CATALOG}),
            "database": "PostgreSQL",
            "documentation": "See README.md or the /system-info endpoint",
        }

    @staticmethod
    def get_sample_data() -> dict[str, Any]:
        return {
            "message": "Data from the backend",
            "items": [dict(item) for item in SAMPLE_ITEMS],
            "total": len(SAMPLE_ITEMS),
            "generated_at": _utc_now(),
        }
