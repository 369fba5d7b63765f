"""Typed errors raised across the service boundary.

Every failure a service reports carries a ``kind`` so the caller can map it
to a response without inspecting messages. Storage driver exceptions are
translated into these types before they leave a service.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class FieldError:
    """A single rejected input field."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


# =============================================================================
# Base class
# =============================================================================


class AppError(Exception):
    """Base class for application errors.

    Attributes:
        kind: Stable identifier for the error category
        message: Human-readable description
        details: Optional structured data for the caller
    """

    kind: ClassVar[str] = "app_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Error kinds
# =============================================================================


class ValidationError(AppError):
    """Input had the wrong shape or was out of range.

    All problems found in one pass are reported together.

    Example:
        >>> raise ValidationError([
        ...     FieldError("title", "Title is required"),
        ...     FieldError("duration_minutes", "Input should be less than or equal to 480"),
        ... ])
    """

    kind = "validation_error"

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        fields = ", ".join(error.field for error in errors)
        super().__init__(
            f"Invalid value for: {fields}",
            details={"errors": [error.to_dict() for error in errors]},
        )


class NotFoundError(AppError):
    """The record does not exist or is not owned by the caller.

    Both cases produce the same message so the caller cannot tell them apart.
    """

    kind = "not_found"

    def __init__(self, resource: str, resource_id: Any) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource.capitalize()} {resource_id} not found")


class DuplicateKeyError(AppError):
    """A uniqueness constraint on an identity field was violated."""

    kind = "duplicate_key"

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(
            f"{' or '.join(fields).capitalize()} already exists",
            details={"fields": fields},
        )


class UnauthorizedError(AppError):
    """The operation needs a principal and none was supplied."""

    kind = "unauthorized"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class StoreUnavailableError(AppError):
    """The backing store could not be reached or timed out.

    Not retried by the services; the caller decides whether to back off.
    """

    kind = "store_unavailable"

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(
            f"Store unavailable during {operation}: {reason}",
            details={"operation": operation},
        )


__all__ = [
    "AppError",
    "DuplicateKeyError",
    "FieldError",
    "NotFoundError",
    "StoreUnavailableError",
    "UnauthorizedError",
    "ValidationError",
]
