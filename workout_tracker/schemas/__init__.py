"""Pydantic schemas for request validation and API responses."""

from workout_tracker.schemas.base import (
    BaseResponse,
    BaseSchema,
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
)
from workout_tracker.schemas.user import (
    TokenResponse,
    UserChangePassword,
    UserLogin,
    UserRegister,
    UserResponse,
)
from workout_tracker.schemas.workout import (
    PublicWorkoutResponse,
    WorkoutFields,
    WorkoutResponse,
    parse_workout_fields,
)

__all__ = [
    "BaseResponse",
    "BaseSchema",
    "ErrorResponse",
    "MessageResponse",
    "PaginatedResponse",
    "PublicWorkoutResponse",
    "TokenResponse",
    "UserChangePassword",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "WorkoutFields",
    "WorkoutResponse",
    "parse_workout_fields",
]
