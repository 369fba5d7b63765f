"""Workout model, the main user-owned collection."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from workout_tracker.models.base import (
    GUID,
    Base,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
    utcnow,
)
from workout_tracker.models.enums import Intensity, WorkoutCategory

if TYPE_CHECKING:
    from workout_tracker.models.user import User


TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
NOTES_MAX_LENGTH = 1000
DURATION_MIN_MINUTES = 1
DURATION_MAX_MINUTES = 480  # 8 hours
CALORIES_MIN = 0
CALORIES_MAX = 2000


class Workout(UUIDMixin, TimestampMixin, Base):
    """A single logged workout.

    Attributes:
        id: UUID primary key (from UUIDMixin)
        title: Short name, 1-100 characters
        description: Optional longer text, up to 500 characters
        category: One of WorkoutCategory, defaults to Other
        duration_minutes: Length of the session, 1-480
        intensity: One of Intensity, defaults to Medium
        date: When the workout happened, defaults to creation time
        calories: Optional energy estimate, 0-2000
        notes: Optional free text, up to 1000 characters
        search_index: Stemmed search terms of title, category, description and notes
        owner_id: UUID of the owning user, fixed at creation
        created_at: Timestamp of creation (from TimestampMixin)
        updated_at: Timestamp of last update (from TimestampMixin)
    """

    __tablename__ = "workouts"
    __table_args__ = (
        CheckConstraint(
            f"duration_minutes BETWEEN {DURATION_MIN_MINUTES} AND {DURATION_MAX_MINUTES}",
            name="ck_workouts_duration_range",
        ),
        CheckConstraint(
            f"calories IS NULL OR calories BETWEEN {CALORIES_MIN} AND {CALORIES_MAX}",
            name="ck_workouts_calories_range",
        ),
        Index("ix_workouts_owner_date", "owner_id", "date"),
    )

    # No ondelete rule: removing a user with workouts is left to the backend default
    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    category: Mapped[WorkoutCategory] = mapped_column(
        String(20),
        nullable=False,
        default=WorkoutCategory.OTHER.value,
    )

    duration_minutes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    intensity: Mapped[Intensity] = mapped_column(
        String(20),
        nullable=False,
        default=Intensity.MEDIUM.value,
    )

    date: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        index=True,
    )

    calories: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    notes: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    # Space-delimited stems of the searchable fields, kept current by WorkoutService
    search_index: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    owner: Mapped[User] = relationship(
        "User",
        back_populates="workouts",
        lazy="raise",
    )

    @validates("owner_id")
    def _validate_owner_id(self, key: str, value: uuid.UUID) -> uuid.UUID:
        current = self.__dict__.get(key)
        if current is not None and current != value:
            raise ValueError("owner_id cannot be changed after creation")
        return value

    def __repr__(self) -> str:
        """Return string representation of the workout."""
        return f"<Workout(id={self.id}, title='{self.title}', owner_id={self.owner_id})>"


__all__ = [
    "CALORIES_MAX",
    "CALORIES_MIN",
    "DESCRIPTION_MAX_LENGTH",
    "DURATION_MAX_MINUTES",
    "DURATION_MIN_MINUTES",
    "NOTES_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "Workout",
]
