"""Shared helper functions."""

from workout_tracker.utils.email import (
    is_valid_email_format,
    normalize_email,
    normalize_username,
)

__all__ = [
    "is_valid_email_format",
    "normalize_email",
    "normalize_username",
]
