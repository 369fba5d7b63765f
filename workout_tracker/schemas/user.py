"""Pydantic schemas for user registration, login and responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from workout_tracker.models.enums import AuthMethod


class UserRegister(BaseModel):
    """Schema for local registration.

    Password rules (minimum length, confirmation match) are checked by the
    identity service so every problem is reported together.
    """

    username: str = Field(..., min_length=1, max_length=50, description="Login name")
    email: EmailStr = Field(..., max_length=255, description="User email address")
    password: str = Field(..., max_length=128, description="Plain text password")
    confirm_password: str = Field(..., max_length=128, description="Password again")


class UserLogin(BaseModel):
    """Schema for username/password login."""

    username: str = Field(..., description="Login name")
    password: str = Field(..., description="User password")


class UserChangePassword(BaseModel):
    """Schema for changing a local user's password."""

    old_password: str = Field(..., description="Current password")
    new_password: str = Field(..., max_length=128, description="New password")


class UserResponse(BaseModel):
    """Schema for user API responses.

    Excludes credentials and federated identifiers.
    """

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: UUID
    username: str
    email: str
    auth_method: AuthMethod
    created_at: datetime
    updated_at: datetime


class TokenResponse(BaseModel):
    """Bearer token issued on login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")


__all__ = [
    "TokenResponse",
    "UserChangePassword",
    "UserLogin",
    "UserRegister",
    "UserResponse",
]
