# This file wraps database access so API services can run parameterized SQL safely.
# It exists to keep pool setup, SQL execution, and driver error details out of router code.
# The client owns a bounded connection pool and the bounded startup retry against the store.
# Driver failures are translated into a small store error taxonomy that routers map to status codes.

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import column, create_engine, func, table, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

if TYPE_CHECKING:
    from src.api.api_config import ApiConfig

LOGGER = logging.getLogger("api.db")

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

UNIQUE_VIOLATION_SQLSTATE = "23505"


class StoreError(Exception):
    """Raised when a store operation fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached or no pooled connection is available."""


class UniqueViolationError(StoreError):
    """Raised when a statement violates a unique constraint."""


def _sqlstate(exc: DBAPIError) -> str | None:
    original = getattr(exc, "orig", None)
    # psycopg2 exposes `pgcode`, psycopg 3 exposes `sqlstate`.
    return getattr(original, "pgcode", None) or getattr(original, "sqlstate", None)


def _error_message(exc: SQLAlchemyError) -> str:
    original = getattr(exc, "orig", None)
    message = str(original if original is not None else exc).strip()
    return message.splitlines()[0] if message else exc.__class__.__name__


def translate_store_error(exc: SQLAlchemyError) -> StoreError:
    """Map a SQLAlchemy/driver exception onto the store error taxonomy."""

    message = _error_message(exc)
    if isinstance(exc, IntegrityError) and _sqlstate(exc) == UNIQUE_VIOLATION_SQLSTATE:
        return UniqueViolationError(message)
    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)):
        return StoreUnavailableError(message)
    return StoreError(message)


def select_list(columns: Mapping[str, str]) -> str:
    """Render `column AS field` pairs so rows come back keyed by response field."""

    parts: list[str] = []
    for field_name, store_column in columns.items():
        for identifier in (field_name, store_column):
            if not _IDENTIFIER_RE.match(identifier):
                raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
        parts.append(
            store_column if store_column == field_name else f"{store_column} AS {field_name}"
        )
    return ", ".join(parts)


class DatabaseClient:
    """SQLAlchemy wrapper owning the pooled connections to the store."""

    def __init__(
        self,
        *,
        database_url: str | None = None,
        pool_size: int = 10,
        pool_timeout_seconds: int = 2,
        pool_recycle_seconds: int = 30,
        engine: Engine | None = None,
    ) -> None:
        if engine is None:
            if not database_url:
                raise ValueError("database_url is required when no engine is supplied.")
            connect_args: dict[str, Any] = {}
            if database_url.startswith("postgresql"):
                connect_args["connect_timeout"] = pool_timeout_seconds
            engine = create_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=0,
                pool_timeout=pool_timeout_seconds,
                pool_recycle=pool_recycle_seconds,
                pool_pre_ping=True,
                connect_args=connect_args,
                future=True,
            )
        self._engine: Engine = engine

    @classmethod
    def from_config(cls, config: ApiConfig) -> DatabaseClient:
        return cls(
            database_url=config.database_url,
            pool_size=config.db_pool_size,
            pool_timeout_seconds=config.db_pool_timeout_seconds,
            pool_recycle_seconds=config.db_pool_recycle_seconds,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def ping(self) -> float:
        """Run a trivial query and return its round-trip latency in milliseconds."""

        started = time.perf_counter()
        with self._translate_errors(), self._engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return (time.perf_counter() - started) * 1000.0

    def can_connect(self) -> bool:
        try:
            self.ping()
            return True
        except StoreError:
            return False

    def wait_until_ready(
        self,
        *,
        attempts: int,
        delay_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
    ) -> bool:
        """Try to reach the store up to `attempts` times with a fixed delay in between."""

        attempt = 0
        while attempt < attempts:
            attempt += 1
            try:
                self.ping()
                LOGGER.info("Connected to the store on attempt %d/%d", attempt, attempts)
                return True
            except StoreError as exc:
                LOGGER.warning(
                    "Store not reachable (attempt %d/%d): %s", attempt, attempts, exc.message
                )
                if attempt < attempts:
                    sleep(delay_seconds)

        LOGGER.error(
            "Giving up on the store after %d attempts; serving degraded responses", attempts
        )
        return False

    def fetch_all(self, query: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        with self._translate_errors(), self._engine.connect() as connection:
            rows = connection.execute(text(query), dict(params or {})).mappings().all()
        return [dict(row) for row in rows]

    def fetch_one(self, query: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        with self._translate_errors(), self._engine.connect() as connection:
            row = connection.execute(text(query), dict(params or {})).mappings().first()
        return dict(row) if row is not None else None

    def fetch_scalar(self, query: str, params: Mapping[str, Any] | None = None) -> Any:
        with self._translate_errors(), self._engine.connect() as connection:
            return connection.execute(text(query), dict(params or {})).scalar_one()

    def execute_returning(
        self, query: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Run a write statement with a RETURNING clause and commit it."""

        with self._translate_errors(), self._engine.begin() as connection:
            row = connection.execute(text(query), dict(params or {})).mappings().first()
        return dict(row) if row is not None else None

    def update_returning(
        self,
        *,
        table_name: str,
        key_column: str,
        key_value: Any,
        changes: Mapping[str, Any],
        returning: Sequence[str],
        touch_column: str | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> dict[str, Any] | None:
        """Apply a set of column changes to one row in a single UPDATE and return the row.

        `labels` renames returned columns, keyed by store column name.
        """

        if not changes:
            raise ValueError("At least one column change is required.")

        output_names = dict(labels or {})
        names = [table_name, key_column, *changes, *returning, *output_names.values()]
        if touch_column is not None:
            names.append(touch_column)
        for name in names:
            self._validate_identifier(name)

        column_names = dict.fromkeys([key_column, *changes, *returning])
        if touch_column is not None:
            column_names[touch_column] = None
        target = table(table_name, *(column(name) for name in column_names))

        values: dict[str, Any] = dict(changes)
        if touch_column is not None:
            values[touch_column] = func.now()

        statement = (
            update(target)
            .where(target.c[key_column] == key_value)
            .values(**values)
            .returning(*(target.c[name].label(output_names.get(name, name)) for name in returning))
        )
        with self._translate_errors(), self._engine.begin() as connection:
            row = connection.execute(statement).mappings().first()
        return dict(row) if row is not None else None

    def dispose(self) -> None:
        self._engine.dispose()

    @staticmethod
    @contextmanager
    def _translate_errors() -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            raise translate_store_error(exc) from exc

    @staticmethod
    def _validate_identifier(identifier: str) -> str:
        if not _IDENTIFIER_RE.match(identifier):
            raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
        return identifier
