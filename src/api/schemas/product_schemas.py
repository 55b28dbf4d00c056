# This file defines response schemas for the read-only product catalog.
# It exists so price scale and stock bounds are part of the published contract.

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.api.schemas.common import SuccessFields


class ProductV1(BaseModel):
    id: int
    name: str
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    created_at: datetime


class ProductListResponseV1(SuccessFields):
    count: int = Field(ge=0)
    products: list[ProductV1]
