# This file provides dependency factories for FastAPI routes.
# It exists so handlers reach the service context owned by the app instead of module globals.
# Services are built per request from the context, which keeps routers thin.
# Tests swap any factory through `app.dependency_overrides`.

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from src.api.api_config import ApiConfig
from src.api.service_context import ServiceContext
from src.api.services.product_service import ProductService
from src.api.services.system_service import SystemService
from src.api.services.user_service import UserService


def get_service_context(request: Request) -> ServiceContext:
    return request.app.state.context


ContextDep = Annotated[ServiceContext, Depends(get_service_context)]


def get_config(context: ContextDep) -> ApiConfig:
    return context.config


def get_user_service(context: ContextDep) -> UserService:
    return UserService(config=context.config, db=context.db)


def get_product_service(context: ContextDep) -> ProductService:
    return ProductService(config=context.config, db=context.db)


def get_system_service(context: ContextDep) -> SystemService:
    return SystemService(context=context)
