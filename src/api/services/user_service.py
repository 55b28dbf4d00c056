# This file implements data retrieval and mutation for user records.
# It exists so routers can manage users without embedding SQL directly.
# Every public method issues exactly one statement against the store and never retries.
# Partial updates are expressed as a patch so only supplied columns are written.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.api.api_config import ApiConfig
from src.api.db_access import DatabaseClient, select_list

# Response field -> store column in the `usuarios` table.
USER_COLUMNS: dict[str, str] = {
    "id": "id",
    "name": "nombre",
    "email": "email",
    "created_at": "creado_en",
    "updated_at": "actualizado_en",
}

# Bounds of the store's SERIAL key; anything outside cannot exist.
MIN_USER_ID = 1
MAX_USER_ID = 2_147_483_647


@dataclass(frozen=True)
class UserPatch:
    """Optional field updates applied to one user in a single statement."""

    name: str | None = None
    email: str | None = None

    def changes(self) -> dict[str, str]:
        return {
            field_name: value
            for field_name, value in (("name", self.name), ("email", self.email))
            if value is not None
        }

    def is_empty(self) -> bool:
        return not self.changes()


def is_valid_user_id(user_id: int) -> bool:
    return MIN_USER_ID <= user_id <= MAX_USER_ID


class UserService:
    """Data access for the user endpoints."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db
        self.users_table = self.config.validate_table_name(self.config.users_table_name)
        self._select_columns = select_list(USER_COLUMNS)

    def list_users(self) -> list[dict[str, Any]]:
        query = f"""
        SELECT {self._select_columns}
        FROM {self.users_table}
        ORDER BY creado_en DESC, id DESC
        """
        return self.db.fetch_all(query)

    def get_user(self, user_id: int) -> dict[str, Any] | None:
        if not is_valid_user_id(user_id):
            return None
        query = f"SELECT {self._select_columns} FROM {self.users_table} WHERE id = :user_id"
        return self.db.fetch_one(query, {"user_id": user_id})

    def create_user(self, *, name: str, email: str) -> dict[str, Any]:
        query = f"""
        INSERT INTO {self.users_table} (nombre, email)
        VALUES (:name, :email)
        RETURNING {self._select_columns}
        """
        row = self.db.execute_returning(query, {"name": name, "email": email})
        if row is None:
            raise RuntimeError("INSERT ... RETURNING produced no row.")
        return row

    def update_user(self, user_id: int, patch: UserPatch) -> dict[str, Any] | None:
        if patch.is_empty():
            raise ValueError("A user patch needs at least one field.")
        if not is_valid_user_id(user_id):
            return None
        changes = {USER_COLUMNS[field_name]: value for field_name, value in patch.changes().items()}
        return self.db.update_returning(
            table_name=self.users_table,
            key_column="id",
            key_value=user_id,
            changes=changes,
            returning=tuple(USER_COLUMNS.values()),
            touch_column=USER_COLUMNS["updated_at"],
            labels={column: field_name for field_name, column in USER_COLUMNS.items()},
        )

    def delete_user(self, user_id: int) -> dict[str, Any] | None:
        if not is_valid_user_id(user_id):
            return None
        query = f"""
        DELETE FROM {self.users_table}
        WHERE id = :user_id
        RETURNING {self._select_columns}
        """
        return self.db.execute_returning(query, {"user_id": user_id})
