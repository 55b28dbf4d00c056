# This file defines request and response schemas for the user endpoints.
# It exists so names and emails are validated at the boundary before any store access.
# Update requests are modeled as a patch where only supplied fields are applied.
# The legacy `nombre` field is accepted as an alias so older frontends keep working.

from __future__ import annotations

import re
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from src.api.schemas.common import MessageFields, SuccessFields

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100


def _clean_name(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("name must not be empty")
    if len(cleaned) > NAME_MAX_LENGTH:
        raise ValueError(f"name must be at most {NAME_MAX_LENGTH} characters")
    return cleaned


def _clean_email(value: str) -> str:
    cleaned = value.strip()
    if not EMAIL_RE.match(cleaned):
        raise ValueError("email format is invalid")
    if len(cleaned) > EMAIL_MAX_LENGTH:
        raise ValueError(f"email must be at most {EMAIL_MAX_LENGTH} characters")
    return cleaned


class UserCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(validation_alias=AliasChoices("name", "nombre"))
    email: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _clean_email(value)


class UserUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "nombre"))
    email: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        return None if value is None else _clean_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return None if value is None else _clean_email(value)

    @model_validator(mode="after")
    def require_one_field(self) -> UserUpdateRequest:
        if self.name is None and self.email is None:
            raise ValueError("at least one field is required to update (name or email)")
        return self


class UserV1(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime | None = None


class UserListResponseV1(SuccessFields):
    count: int = Field(ge=0)
    users: list[UserV1]


class UserResponseV1(SuccessFields):
    user: UserV1


class UserMutationResponseV1(MessageFields):
    user: UserV1


class UserDeletedResponseV1(MessageFields):
    deleted_user: UserV1
