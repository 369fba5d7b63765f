"""JWT access token creation and validation.

Uses python-jose. The token subject is the user id; signing key, algorithm
and lifetime come from the settings object passed in by the caller.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt

if TYPE_CHECKING:
    from workout_tracker.core.config import Settings


def create_access_token(
    settings: Settings,
    subject: str | Any,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token.

    Args:
        settings: Settings providing SECRET_KEY, JWT_ALGORITHM and the default lifetime
        subject: Subject of the token (the user id)
        expires_delta: Optional custom expiration time

    Examples:
        >>> token = create_access_token(settings, "user-123")
        >>> isinstance(token, str)
        True
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": datetime.now(UTC) + expires_delta, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> dict[str, Any] | None:
    """Decode and validate a JWT access token.

    Returns:
        Decoded payload if the signature and expiry are valid, None otherwise.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        # Covers expired signatures as well
        return None


def verify_token(settings: Settings, token: str) -> str | None:
    """Verify a JWT token and return its subject (user id), or None."""
    payload = decode_access_token(settings, token)
    if payload is None:
        return None
    return payload.get("sub")


__all__ = [
    "create_access_token",
    "decode_access_token",
    "verify_token",
]
