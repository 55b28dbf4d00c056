# This file defines the read-only product catalog endpoint.
# Products are seeded by the store init script and only listed here.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.api_config import ApiConfig
from src.api.db_access import StoreError
from src.api.dependencies import get_config, get_product_service
from src.api.error_handlers import store_failure
from src.api.response_envelope import build_list_envelope
from src.api.schemas.common import ErrorResponse
from src.api.schemas.product_schemas import ProductListResponseV1
from src.api.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])
ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.get("", response_model=ProductListResponseV1, responses={500: {"model": ErrorResponse}})
def list_products(service: ProductServiceDep, config: ConfigDep) -> dict[str, object]:
    try:
        rows = service.list_products()
    except StoreError as exc:
        raise store_failure(exc, config) from exc
    return build_list_envelope(key="products", rows=rows)
