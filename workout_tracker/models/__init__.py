"""SQLAlchemy models.

This package contains all database models.
"""

from workout_tracker.models.base import Base, TimestampMixin, UUIDMixin
from workout_tracker.models.enums import (
    AuthMethod,
    Intensity,
    SearchScope,
    WorkoutCategory,
)
from workout_tracker.models.user import User
from workout_tracker.models.workout import Workout

__all__ = [
    # Base classes
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    # Enums
    "AuthMethod",
    "Intensity",
    "SearchScope",
    "WorkoutCategory",
    # Models
    "User",
    "Workout",
]
