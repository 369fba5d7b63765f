"""Workout Tracker Backend Application.

Multi-user workout logging API with ownership-scoped records and search.
"""

from workout_tracker import db

__version__ = "0.1.0"

__all__ = [
    "db",
    "__version__",
]
