# This file implements read access to the seeded product catalog.
# Products are never mutated through the API, so the service only lists them.

from __future__ import annotations

from typing import Any

from src.api.api_config import ApiConfig
from src.api.db_access import DatabaseClient, select_list

# Response field -> store column in the `productos` table.
PRODUCT_COLUMNS: dict[str, str] = {
    "id": "id",
    "name": "nombre",
    "price": "precio",
    "stock": "stock",
    "created_at": "creado_en",
}


class ProductService:
    """Data retrieval for the product endpoints."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db
        self.products_table = self.config.validate_table_name(self.config.products_table_name)

    def list_products(self) -> list[dict[str, Any]]:
        query = f"""
        SELECT {select_list(PRODUCT_COLUMNS)}
        FROM {self.products_table}
        ORDER BY creado_en DESC, id DESC
        """
        return self.db.fetch_all(query)
