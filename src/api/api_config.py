# This file defines runtime settings for the API layer in one place.
# It exists so pool sizing, startup retry, CORS, and table names can be configured without code edits.
# The config loader reads environment variables and applies safe defaults for local development.
# It also validates table names to prevent unsafe SQL identifier usage.

from __future__ import annotations

import os
import re
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.common.settings import get_settings

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

DEFAULT_TABLE_NAMES: frozenset[str] = frozenset({"usuarios", "productos"})


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Backend API"
    description: str = "REST API with FastAPI and PostgreSQL for the multi-container demo"
    app_version: str = "3.0.0"
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    database_url: str
    database_host: str = "database"
    db_pool_size: int = 10
    db_pool_timeout_seconds: int = 2
    db_pool_recycle_seconds: int = 30
    db_connect_attempts: int = 5
    db_connect_delay_seconds: float = 2.0
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    users_table_name: str = "usuarios"
    products_table_name: str = "productos"
    allowed_table_names: set[str] = Field(default_factory=lambda: set(DEFAULT_TABLE_NAMES))

    @field_validator("users_table_name", "products_table_name")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"Unsafe SQL identifier: {value!r}")
        return value

    @field_validator(
        "port",
        "db_pool_size",
        "db_pool_timeout_seconds",
        "db_pool_recycle_seconds",
        "db_connect_attempts",
    )
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    @field_validator("db_connect_delay_seconds")
    @classmethod
    def validate_non_negative_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Delay must not be negative.")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def validate_table_name(self, table_name: str) -> str:
        if not _IDENTIFIER_RE.match(table_name):
            raise ValueError(f"Unsafe SQL identifier: {table_name!r}")
        if table_name not in self.allowed_table_names:
            raise ValueError(f"Table name is not in allowlist: {table_name!r}")
        return table_name


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def _build_allowed_table_names(config_values: dict[str, object]) -> set[str]:
    configured_names = {
        str(config_values["users_table_name"]),
        str(config_values["products_table_name"]),
    }
    configured_names.update(DEFAULT_TABLE_NAMES)
    configured_names.update(_env_list("API_ALLOWED_TABLE_NAMES", []))
    for table_name in configured_names:
        if not _IDENTIFIER_RE.match(table_name):
            raise ValueError(f"Unsafe SQL identifier in allowlist: {table_name!r}")
    return configured_names


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    settings = get_settings()
    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Backend API"),
        "app_version": os.getenv("APP_VERSION", "3.0.0"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 3000),
        "environment": settings.ENV,
        "database_url": settings.database_url,
        "database_host": settings.DB_HOST,
        "db_pool_size": _env_int("API_DB_POOL_SIZE", 10),
        "db_pool_timeout_seconds": _env_int("API_DB_POOL_TIMEOUT_SECONDS", 2),
        "db_pool_recycle_seconds": _env_int("API_DB_POOL_RECYCLE_SECONDS", 30),
        "db_connect_attempts": _env_int("API_DB_CONNECT_ATTEMPTS", 5),
        "db_connect_delay_seconds": _env_float("API_DB_CONNECT_DELAY_SECONDS", 2.0),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", ["*"]),
        "users_table_name": os.getenv("API_USERS_TABLE_NAME", "usuarios"),
        "products_table_name": os.getenv("API_PRODUCTS_TABLE_NAME", "productos"),
    }
    config_values["allowed_table_names"] = _build_allowed_table_names(config_values)

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
