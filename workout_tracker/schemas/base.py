"""Base Pydantic schemas with common patterns.

This module defines base schemas and common patterns used across the API.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Required at runtime for Pydantic
from typing import Any, Generic, TypeVar
from uuid import UUID  # noqa: TC003 - Required at runtime for Pydantic

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base schema with common configuration for all schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class BaseResponse(BaseSchema):
    """Base response schema with id and timestamps."""

    id: UUID = Field(
        ...,
        description="Unique identifier (UUID v4)",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )
    created_at: datetime = Field(
        ...,
        description="Timestamp when the resource was created",
        examples=["2024-01-15T10:30:00Z"],
    )
    updated_at: datetime = Field(
        ...,
        description="Timestamp when the resource was last updated",
        examples=["2024-01-15T12:45:00Z"],
    )


class PaginatedResponse(BaseSchema, Generic[T]):
    """Generic paginated response wrapper."""

    items: list[T] = Field(..., description="List of items in the current page")
    total: int = Field(..., ge=0, description="Total number of matching items")
    skip: int = Field(..., ge=0, description="Number of items skipped")
    limit: int = Field(..., ge=1, description="Maximum items per page")

    @classmethod
    def create(
        cls,
        items: list[T],
        total: int,
        skip: int,
        limit: int,
    ) -> PaginatedResponse[T]:
        """Create a paginated response from items and pagination info."""
        return cls(items=items, total=total, skip=skip, limit=limit)


class ErrorResponse(BaseSchema):
    """Standard error response schema."""

    error: str = Field(
        ...,
        description="Error kind identifier",
        examples=["validation_error"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid value for: title"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details",
        examples=[{"errors": [{"field": "title", "message": "Field required"}]}],
    )


class MessageResponse(BaseSchema):
    """Simple message response schema."""

    message: str = Field(
        ...,
        description="Response message",
        examples=["Operation completed successfully"],
    )


__all__ = [
    "BaseResponse",
    "BaseSchema",
    "ErrorResponse",
    "MessageResponse",
    "PaginatedResponse",
]
