"""
Application settings loaded from environment variables.
It centralizes the process-level values the orchestration layer wires in: environment name, log level, and store credentials.
Keeping these helpers isolated reduces duplication and keeps API modules focused on request handling.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Final

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_ENV_VALUES: Final[dict[str, str]] = {
    "ENV": "development",
    "LOG_LEVEL": "INFO",
    "DB_HOST": "database",
    "DB_PORT": "5432",
    "DB_USER": "postgres",
    "DB_PASSWORD": "password123",
    "DB_NAME": "proyecto_db",
    "DATABASE_URL": "",
}


class Settings(BaseModel):
    """Typed runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    ENV: str
    LOG_LEVEL: str
    DB_HOST: str
    DB_PORT: int = Field(gt=0, lt=65536)
    DB_USER: str
    DB_PASSWORD: str
    DB_NAME: str
    DATABASE_URL: str = ""

    @field_validator("ENV", "LOG_LEVEL", "DB_HOST", "DB_USER", "DB_NAME")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Value must not be blank.")
        return cleaned

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"


def load_settings(*, load_env: bool = True) -> Settings:
    """Load and validate environment settings from `.env` and process environment."""

    if load_env:
        load_dotenv()

    values = {
        key: os.getenv(key) or default for key, default in DEFAULT_ENV_VALUES.items()
    }
    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached accessor for application settings."""

    return load_settings()
