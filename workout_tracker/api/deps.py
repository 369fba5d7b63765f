"""API dependencies.

Common dependencies for API routes including settings, database sessions,
authentication, pagination and service construction.
"""

from typing import Annotated

from fastapi import Depends, Header, Query, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from workout_tracker.core.config import Settings
from workout_tracker.core.exceptions import UnauthorizedError
from workout_tracker.core.jwt import verify_token
from workout_tracker.core.principal import Principal
from workout_tracker.db.session import get_db
from workout_tracker.models.user import User
from workout_tracker.services.user_service import UserService
from workout_tracker.services.workout_service import WorkoutService

# =============================================================================
# Settings and Database Session Dependencies
# =============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings object the application was created with."""
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]

DBSession = Annotated[AsyncSession, Depends(get_db)]
"""Type alias for database session dependency injection.

Usage:
    @router.get("/items")
    async def get_items(db: DBSession):
        result = await db.execute(select(Item))
        return result.scalars().all()
"""


# =============================================================================
# Pagination Dependencies
# =============================================================================


class PaginationParams(BaseModel):
    """Pagination parameters for list endpoints.

    Attributes:
        skip: Number of records to skip (offset).
        limit: Maximum number of records to return.
    """

    skip: int = Field(default=0, ge=0, description="Number of records to skip")
    limit: int = Field(
        default=20, ge=1, le=100, description="Maximum number of records to return"
    )


def get_pagination_params(
    skip: Annotated[int, Query(ge=0, description="Number of records to skip")] = 0,
    limit: Annotated[
        int, Query(ge=1, le=100, description="Maximum number of records to return")
    ] = 20,
) -> PaginationParams:
    """Get pagination parameters from query string.

    Args:
        skip: Number of records to skip (default: 0).
        limit: Maximum number of records to return (default: 20, max: 100).

    Returns:
        PaginationParams: Pagination configuration.
    """
    return PaginationParams(skip=skip, limit=limit)


Pagination = Annotated[PaginationParams, Depends(get_pagination_params)]
"""Type alias for pagination dependency injection.

Usage:
    @router.get("/items")
    async def list_items(pagination: Pagination):
        return await service.list(skip=pagination.skip, limit=pagination.limit)
"""


# =============================================================================
# Service Dependencies
# =============================================================================


def get_user_service(db: DBSession, settings: AppSettings) -> UserService:
    return UserService(db, settings)


def get_workout_service(db: DBSession, settings: AppSettings) -> WorkoutService:
    return WorkoutService(db, settings)


Users = Annotated[UserService, Depends(get_user_service)]
Workouts = Annotated[WorkoutService, Depends(get_workout_service)]


# =============================================================================
# Authentication Dependencies
# =============================================================================


def _bearer_token(authorization: str | None) -> str | None:
    if authorization is None:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user_optional(
    users: Users,
    settings: AppSettings,
    authorization: Annotated[str | None, Header()] = None,
) -> User | None:
    """Get current user if authenticated (optional).

    Missing, malformed or expired tokens, and tokens for users that no
    longer exist, all resolve to None.

    Args:
        users: Identity store.
        settings: Settings holding the token signing key.
        authorization: Authorization header value (format: "Bearer <token>").

    Returns:
        User object if authenticated, None otherwise.
    """
    token = _bearer_token(authorization)
    if token is None:
        return None

    user_id = verify_token(settings, token)
    if user_id is None:
        return None

    return await users.find_by_id(user_id)


async def get_current_user(
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    """Get current authenticated user (required).

    Raises:
        UnauthorizedError: If not authenticated or the user no longer exists.
    """
    if user is None:
        raise UnauthorizedError("Invalid or missing authentication credentials")
    return user


CurrentUserOptional = Annotated[User | None, Depends(get_current_user_optional)]
"""Type alias for optional current user dependency."""

CurrentUser = Annotated[User, Depends(get_current_user)]
"""Type alias for required current user dependency.

Usage:
    @router.post("/items")
    async def create_item(current_user: CurrentUser, item: ItemCreate):
        return await service.create_item(item, owner=current_user)
"""


def get_current_principal(user: CurrentUser) -> Principal:
    return Principal.from_user(user)


def get_optional_principal(user: CurrentUserOptional) -> Principal | None:
    return Principal.from_user(user) if user is not None else None


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
OptionalPrincipal = Annotated[Principal | None, Depends(get_optional_principal)]


__all__ = [
    "AppSettings",
    "CurrentPrincipal",
    "CurrentUser",
    "CurrentUserOptional",
    "DBSession",
    "OptionalPrincipal",
    "Pagination",
    "PaginationParams",
    "Users",
    "Workouts",
    "get_app_settings",
    "get_current_principal",
    "get_current_user",
    "get_current_user_optional",
    "get_db",
    "get_optional_principal",
    "get_pagination_params",
    "get_user_service",
    "get_workout_service",
]
