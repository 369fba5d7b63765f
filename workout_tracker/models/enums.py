"""Domain enum definitions for the workout tracker.

Values are stored as plain strings in the database.
"""

from enum import Enum


class WorkoutCategory(str, Enum):
    """Kind of training a workout belongs to."""

    CARDIO = "Cardio"
    STRENGTH = "Strength"
    FLEXIBILITY = "Flexibility"
    SPORTS = "Sports"
    OTHER = "Other"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class Intensity(str, Enum):
    """Perceived effort of a workout."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class AuthMethod(str, Enum):
    """How a user proves their identity.

    LOCAL users hold a password hash; FEDERATED users are linked to an
    identity at an external provider.
    """

    LOCAL = "local"
    FEDERATED = "federated"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class SearchScope(str, Enum):
    """Which owners' workouts a search covers."""

    MINE = "mine"
    PUBLIC = "public"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


__all__ = [
    "AuthMethod",
    "Intensity",
    "SearchScope",
    "WorkoutCategory",
]
