"""Core application configuration and utilities.

This package contains core functionality including:
- Configuration management (config.py)
- Typed service errors (exceptions.py)
- Password hashing (security.py) and access tokens (jwt.py)
- Logging setup (logging.py)
"""

from workout_tracker.core.config import Settings, get_settings
from workout_tracker.core.exceptions import (
    AppError,
    DuplicateKeyError,
    FieldError,
    NotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from workout_tracker.core.principal import Principal

__all__ = [
    "AppError",
    "DuplicateKeyError",
    "FieldError",
    "NotFoundError",
    "Principal",
    "Settings",
    "StoreUnavailableError",
    "UnauthorizedError",
    "ValidationError",
    "get_settings",
]
