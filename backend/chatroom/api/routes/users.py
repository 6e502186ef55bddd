"""User Routes — signup, login, lookup, deletion and password reset.

Invariants:
    - Bodies validated by UserCredentials before the service is called
    - Service results are either SafeUser (200) or ServiceError (status from its code)
    - Password never appears in a response body
"""

import logging

from fastapi import APIRouter, Depends

from chatroom.api.dependencies import get_user_service
from chatroom.api.error_handlers import error_response
from chatroom.core.errors import is_error
from chatroom.schemas.user import SafeUser, UserCredentials, UserUpdate
from chatroom.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/user", tags=["users"])


@router.post("/signup", response_model=SafeUser)
async def create_user(
    body: UserCredentials, service: UserService = Depends(get_user_service),
):
    """Create a new account."""
    result = await service.create(body.username, body.password)
    if is_error(result):
        return error_response(result)
    return result


@router.post("/login", response_model=SafeUser)
async def login(
    body: UserCredentials, service: UserService = Depends(get_user_service),
):
    """Check a username/password pair."""
    result = await service.authenticate(body.username, body.password)
    if is_error(result):
        return error_response(result)
    return result


@router.get("/getUser/{username}", response_model=SafeUser)
async def get_user(
    username: str, service: UserService = Depends(get_user_service),
):
    result = await service.get_by_username(username)
    if is_error(result):
        return error_response(result)
    return result


@router.delete("/deleteUser/{username}", response_model=SafeUser)
async def delete_user(
    username: str, service: UserService = Depends(get_user_service),
):
    result = await service.delete_by_username(username)
    if is_error(result):
        return error_response(result)
    return result


@router.patch("/resetPassword", response_model=SafeUser)
async def reset_password(
    body: UserCredentials, service: UserService = Depends(get_user_service),
):
    """Replace the password of an existing account."""
    result = await service.update(
        body.username, UserUpdate(password=body.password),
    )
    if is_error(result):
        return error_response(result)
    return result
