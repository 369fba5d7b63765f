"""Email and username normalization utilities.

Identity fields are compared in their normalized form, so every lookup and
insert goes through these helpers.
"""

from __future__ import annotations

import re
from typing import Final

# Supports: local@domain, local+tag@domain, first.last@domain.co.uk
EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)


def normalize_email(email: str | None) -> str:
    """Normalize email address for storage and comparison.

    Examples:
        >>> normalize_email("Test@Example.COM")
        'test@example.com'
        >>> normalize_email("  test@example.com  ")
        'test@example.com'
    """
    if not email:
        return ""
    return email.strip().lower()


def normalize_username(username: str | None) -> str:
    """Trim surrounding whitespace; usernames keep their case.

    Examples:
        >>> normalize_username("  runner42 ")
        'runner42'
    """
    if not username:
        return ""
    return username.strip()


def is_valid_email_format(email: str | None) -> bool:
    """Validate email format using a regex pattern.

    Examples:
        >>> is_valid_email_format("user@example.com")
        True
        >>> is_valid_email_format("invalid-email")
        False
    """
    if not email:
        return False
    return EMAIL_PATTERN.match(email) is not None


__all__ = [
    "is_valid_email_format",
    "normalize_email",
    "normalize_username",
]
