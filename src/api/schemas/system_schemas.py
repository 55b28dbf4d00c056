# This file defines schemas for the informational endpoints and the stats summary.
# It exists so static capability descriptions and sample payloads still have explicit shapes.
# The stats model groups store counts with server metadata for the dashboard page.
# Echo responses keep the received body untyped because any JSON value is accepted.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.api.schemas.common import MessageFields, SuccessFields


class EndpointDescription(BaseModel):
    method: str
    path: str
    description: str


class DatabaseDescription(BaseModel):
    type: str
    host: str


class ServerDescription(BaseModel):
    start_time: datetime
    uptime: str
    python_version: str
    environment: str


class ProjectDescription(BaseModel):
    name: str
    members: int
    services: list[str]


class SystemInfoResponse(SuccessFields):
    service: str
    version: str
    description: str
    endpoints: list[EndpointDescription]
    database: DatabaseDescription
    server: ServerDescription
    project: ProjectDescription


class InfoResponse(SuccessFields):
    service: str
    version: str
    endpoints: list[str]
    database: str
    documentation: str


class SampleItem(BaseModel):
    id: int
    name: str
    value: int


class SampleDataResponse(MessageFields):
    items: list[SampleItem]
    total: int
    generated_at: datetime


class EchoResponse(MessageFields):
    received: Any = None
    echoed_at: datetime


class UserStats(BaseModel):
    total: int = Field(ge=0)


class ProductStats(BaseModel):
    total: int = Field(ge=0)
    total_stock: int = Field(ge=0)


class DatabaseStats(BaseModel):
    version: str
    connection: str


class ApiStats(BaseModel):
    uptime: str
    start_time: datetime
    environment: str
    python_version: str


class StatsBlock(BaseModel):
    users: UserStats
    products: ProductStats
    database: DatabaseStats
    api: ApiStats


class StatsResponse(SuccessFields):
    stats: StatsBlock
