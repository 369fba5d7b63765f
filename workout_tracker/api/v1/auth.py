"""Authentication API Router.

Local registration, username/password login issuing bearer tokens, the
current-user endpoint and password change.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from workout_tracker.api.deps import AppSettings, CurrentUser, Users
from workout_tracker.core.exceptions import UnauthorizedError
from workout_tracker.core.jwt import create_access_token
from workout_tracker.schemas.base import MessageResponse
from workout_tracker.schemas.user import (
    TokenResponse,
    UserChangePassword,
    UserLogin,
    UserRegister,
    UserResponse,
)

router = APIRouter()


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a local user",
)
async def register(data: UserRegister, users: Users) -> UserResponse:
    """Create a local user.

    Password length and confirmation problems are reported together with
    any other field problems as one 422 response.
    """
    user = await users.register(
        username=data.username,
        email=data.email,
        password=data.password,
        confirm_password=data.confirm_password,
    )
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in with username and password",
)
async def login(data: UserLogin, users: Users, settings: AppSettings) -> TokenResponse:
    """Exchange username and password for a bearer token."""
    user = await users.authenticate(data.username, data.password)
    if user is None:
        raise UnauthorizedError("Invalid username or password")

    return TokenResponse(
        access_token=create_access_token(settings, user.id),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current user",
)
async def me(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change the current user's password",
)
async def change_password(
    data: UserChangePassword,
    current_user: CurrentUser,
    users: Users,
) -> MessageResponse:
    """Change a local user's password.

    Federated users have no password and always get 401, as does a wrong
    current password.
    """
    changed = await users.change_password(
        current_user.id, data.old_password, data.new_password
    )
    if not changed:
        raise UnauthorizedError("Current password is incorrect")
    return MessageResponse(message="Password changed")
