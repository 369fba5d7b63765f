"""Password hashing and verification utilities.

Passwords are hashed with bcrypt using a per-hash random salt. The plaintext
is never stored or logged; only lengths and algorithm prefixes appear in
debug logs.
"""

from __future__ import annotations

import bcrypt

from workout_tracker.core.logging import get_logger

logger = get_logger(__name__)

# Cost factor; each increment doubles the hashing time
DEFAULT_BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of input
BCRYPT_MAX_BYTES = 72


def _prepare_password(password: str) -> bytes:
    """Encode a password for bcrypt, truncated to 72 bytes."""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        password_bytes = password_bytes[:BCRYPT_MAX_BYTES]
    return password_bytes


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt.

    Each hash uses a unique salt, so the same password produces different
    hashes.

    Args:
        password: Plain text password to hash
        rounds: bcrypt cost factor

    Returns:
        Bcrypt hash string (60 characters, e.g. ``$2b$12$...``)

    Examples:
        >>> hashed = hash_password("SecurePass123!")
        >>> hashed.startswith("$2b$12$")
        True
    """
    logger.debug(
        "Password hashing operation",
        extra={
            "context": {
                "action": "hash_password",
                "length": len(password),
                "truncated": len(password.encode("utf-8")) > BCRYPT_MAX_BYTES,
                "rounds": rounds,
            }
        },
    )

    salt = bcrypt.gensalt(rounds=rounds)
    hashed: str = bcrypt.hashpw(_prepare_password(password), salt).decode("utf-8")
    return hashed


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a password against a bcrypt hash.

    Uses bcrypt's constant-time comparison. Malformed or missing hashes
    verify as ``False`` instead of raising.

    Examples:
        >>> hashed = hash_password("SecurePass123!")
        >>> verify_password("SecurePass123!", hashed)
        True
        >>> verify_password("WrongPass456!", hashed)
        False
    """
    if not hashed_password:
        return False

    try:
        result: bool = bcrypt.checkpw(
            _prepare_password(plain_password), hashed_password.encode("utf-8")
        )
    except ValueError as e:
        logger.warning(
            "Password verification failed on malformed hash",
            extra={
                "context": {
                    "action": "verify_password",
                    "error_type": type(e).__name__,
                    "status": "failed",
                }
            },
        )
        return False

    logger.debug(
        "Password verification completed",
        extra={"context": {"action": "verify_password", "result": result}},
    )
    return result


def check_password_policy(password: str, min_length: int) -> list[str]:
    """Return the list of policy problems with a new password.

    An empty list means the password is acceptable.

    Examples:
        >>> check_password_policy("abc", min_length=6)
        ['Password must be at least 6 characters']
        >>> check_password_policy("longenough", min_length=6)
        []
    """
    problems: list[str] = []
    if len(password) < min_length:
        problems.append(f"Password must be at least {min_length} characters")
    if password and not password.strip():
        problems.append("Password must not be only whitespace")
    return problems


__all__ = [
    "DEFAULT_BCRYPT_ROUNDS",
    "check_password_policy",
    "hash_password",
    "verify_password",
]
