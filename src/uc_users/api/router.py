"""uc_users REST endpoints.

GET    /users          — all users, ascending id (never cached)
GET    /users/{id}     — single user (cache-aside)
POST   /users          — create
PUT    /users/{id}     — partial update, invalidates cache
DELETE /users/{id}     — delete, invalidates cache

Server-side failures are reported with a generic per-endpoint message;
the underlying detail only goes to the log.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status

from src.uc_common.errors import AppError, InternalError
from src.uc_common.response import ErrorResponse
from src.uc_users.api.dependencies import get_user_service
from src.uc_users.application.schemas import CreateUserRequest, UpdateUserRequest, UserOut
from src.uc_users.application.service import UserApplicationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

UserId = Annotated[int, Path(ge=-2_147_483_648, le=2_147_483_647)]  # SERIAL is int4
Service = Annotated[UserApplicationService, Depends(get_user_service)]

_ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@contextmanager
def _generic_failure(message: str) -> Iterator[None]:
    """Re-raise client errors as-is; replace anything server-side with `message`."""
    try:
        yield
    except AppError as exc:
        if exc.http_status < 500:
            raise
        logger.error("%s: [%d] %s", message, exc.code, exc.message)
        raise InternalError(message) from exc
    except Exception as exc:
        logger.exception(message)
        raise InternalError(message) from exc


@router.get("", response_model=list[UserOut], responses=_ERROR_RESPONSES)
async def list_users(service: Service) -> list[UserOut]:
    with _generic_failure("Failed to fetch users"):
        users = await service.list_users()
    return [UserOut.from_domain(u) for u in users]


@router.get("/{user_id}", response_model=UserOut, responses=_ERROR_RESPONSES)
async def get_user(user_id: UserId, service: Service) -> UserOut:
    with _generic_failure("Failed to fetch user"):
        user = await service.get_user(user_id)
    return UserOut.from_domain(user)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserOut,
    responses=_ERROR_RESPONSES,
)
async def create_user(service: Service, body: CreateUserRequest | None = None) -> UserOut:
    body = body or CreateUserRequest()
    with _generic_failure("Failed to create user"):
        user = await service.create_user(body.name, body.email)
    return UserOut.from_domain(user)


@router.put("/{user_id}", response_model=UserOut, responses=_ERROR_RESPONSES)
async def update_user(
    user_id: UserId, service: Service, body: UpdateUserRequest | None = None
) -> UserOut:
    body = body or UpdateUserRequest()
    with _generic_failure("Failed to update user"):
        user = await service.update_user(user_id, name=body.name, email=body.email)
    return UserOut.from_domain(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ERROR_RESPONSES,
)
async def delete_user(user_id: UserId, service: Service) -> Response:
    with _generic_failure("Failed to delete user"):
        await service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
