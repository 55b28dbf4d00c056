# This file defines the user CRUD endpoints.
# It exists so request validation, store calls, and error translation for users live in one place.
# Each handler performs a single store operation and maps misses, conflicts, and failures to status codes.
# Store errors are caught here and never propagate past the route.

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from src.api.api_config import ApiConfig
from src.api.db_access import StoreError, UniqueViolationError
from src.api.dependencies import get_config, get_user_service
from src.api.error_handlers import APIError, store_failure
from src.api.response_envelope import build_list_envelope, build_object_envelope
from src.api.schemas.common import ErrorResponse
from src.api.schemas.user_schemas import (
    UserCreateRequest,
    UserDeletedResponseV1,
    UserListResponseV1,
    UserMutationResponseV1,
    UserResponseV1,
    UserUpdateRequest,
)
from src.api.services.user_service import UserPatch, UserService

router = APIRouter(prefix="/users", tags=["users"])
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


def _error_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    return {code: {"model": ErrorResponse} for code in status_codes}


def _not_found(user_id: int) -> APIError:
    return APIError(
        status_code=404,
        error_code="USER_NOT_FOUND",
        message=f"User with id {user_id} not found",
    )


def _email_conflict(email: str) -> APIError:
    return APIError(
        status_code=409,
        error_code="EMAIL_CONFLICT",
        message=f"The email '{email}' is already registered",
    )


@router.get("", response_model=UserListResponseV1, responses=_error_responses(500))
def list_users(service: UserServiceDep, config: ConfigDep) -> dict[str, object]:
    try:
        rows = service.list_users()
    except StoreError as exc:
        raise store_failure(exc, config) from exc
    return build_list_envelope(key="users", rows=rows)


@router.get(
    "/{user_id}",
    response_model=UserResponseV1,
    responses=_error_responses(400, 404, 500),
)
def get_user(user_id: int, service: UserServiceDep, config: ConfigDep) -> dict[str, object]:
    try:
        row = service.get_user(user_id)
    except StoreError as exc:
        raise store_failure(exc, config) from exc
    if row is None:
        raise _not_found(user_id)
    return build_object_envelope(user=row)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserMutationResponseV1,
    responses=_error_responses(400, 409, 500),
)
def create_user(
    payload: UserCreateRequest, service: UserServiceDep, config: ConfigDep
) -> dict[str, object]:
    try:
        row = service.create_user(name=payload.name, email=payload.email)
    except UniqueViolationError as exc:
        raise _email_conflict(payload.email) from exc
    except StoreError as exc:
        raise store_failure(exc, config) from exc
    return build_object_envelope(message="User created successfully", user=row)


@router.put(
    "/{user_id}",
    response_model=UserMutationResponseV1,
    responses=_error_responses(400, 404, 409, 500),
)
def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    service: UserServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    patch = UserPatch(name=payload.name, email=payload.email)
    try:
        row = service.update_user(user_id, patch)
    except UniqueViolationError as exc:
        raise _email_conflict(payload.email or "") from exc
    except StoreError as exc:
        raise store_failure(exc, config) from exc
    if row is None:
        raise _not_found(user_id)
    return build_object_envelope(message="User updated successfully", user=row)


@router.delete(
    "/{user_id}",
    response_model=UserDeletedResponseV1,
    responses=_error_responses(400, 404, 500),
)
def delete_user(user_id: int, service: UserServiceDep, config: ConfigDep) -> dict[str, object]:
    try:
        row = service.delete_user(user_id)
    except StoreError as exc:
        raise store_failure(exc, config) from exc
    if row is None:
        raise _not_found(user_id)
    return build_object_envelope(message="User deleted successfully", deleted_user=row)
