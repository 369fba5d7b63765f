"""Workout schemas for input validation and API responses.

``WorkoutFields`` is the single validation point for create and update:
services pass raw field mappings through ``parse_workout_fields``, which
collects every problem into one ValidationError.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import UUID  # noqa: TC003 - Required at runtime for Pydantic

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from workout_tracker.core.exceptions import FieldError, ValidationError
from workout_tracker.models.enums import Intensity, WorkoutCategory
from workout_tracker.models.workout import (
    CALORIES_MAX,
    CALORIES_MIN,
    DESCRIPTION_MAX_LENGTH,
    DURATION_MAX_MINUTES,
    DURATION_MIN_MINUTES,
    NOTES_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)
from workout_tracker.schemas.base import BaseResponse

# =============================================================================
# Input validation
# =============================================================================


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class WorkoutFields(BaseModel):
    """Caller-editable workout fields.

    Server-assigned fields (id, owner_id, created_at, updated_at) are not
    accepted; passing one is a validation error.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
    )

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    category: WorkoutCategory = WorkoutCategory.OTHER
    duration_minutes: int = Field(..., ge=DURATION_MIN_MINUTES, le=DURATION_MAX_MINUTES)
    intensity: Intensity = Intensity.MEDIUM
    date: datetime | None = None
    calories: int | None = Field(default=None, ge=CALORIES_MIN, le=CALORIES_MAX)
    notes: str | None = Field(default=None, max_length=NOTES_MAX_LENGTH)

    @field_validator("description", "notes", "calories", "date", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty form values of optional fields as absent."""
        return None if _is_blank(v) else v

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> Any:
        return WorkoutCategory.OTHER if _is_blank(v) else v

    @field_validator("intensity", mode="before")
    @classmethod
    def default_intensity(cls, v: Any) -> Any:
        return Intensity.MEDIUM if _is_blank(v) else v

    @field_validator("duration_minutes", "calories", mode="before")
    @classmethod
    def reject_booleans(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("Input should be a valid integer")
        return v

    @field_validator("date")
    @classmethod
    def date_as_utc(cls, v: datetime | None) -> datetime | None:
        """Naive datetimes are taken to be UTC."""
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)


def parse_workout_fields(fields: Mapping[str, Any] | Any) -> WorkoutFields:
    """Validate raw workout field values.

    Args:
        fields: Mapping of field name to raw value (strings from forms are coerced)

    Returns:
        The validated fields

    Raises:
        ValidationError: With one FieldError per rejected field.

    Examples:
        >>> parse_workout_fields({"title": "Run", "duration_minutes": "30"}).duration_minutes
        30
    """
    if not isinstance(fields, Mapping):
        raise ValidationError([FieldError("fields", "Workout fields must be an object")])

    try:
        return WorkoutFields.model_validate(dict(fields))
    except PydanticValidationError as e:
        errors = [
            FieldError(
                field=".".join(str(part) for part in error["loc"]) or "fields",
                message=error["msg"],
            )
            for error in e.errors()
        ]
        raise ValidationError(errors) from e


# =============================================================================
# Response Schemas
# =============================================================================


class WorkoutResponse(BaseResponse):
    """Workout as returned to its owner."""

    title: str
    description: str | None = None
    category: WorkoutCategory
    duration_minutes: int
    intensity: Intensity
    date: datetime
    calories: int | None = None
    notes: str | None = None
    owner_id: UUID


class PublicWorkoutResponse(WorkoutResponse):
    """Workout in the public listing, with the owner's username."""

    owner_username: str | None = None


__all__ = [
    "PublicWorkoutResponse",
    "WorkoutFields",
    "WorkoutResponse",
    "parse_workout_fields",
]
