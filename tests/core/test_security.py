"""Password hashing and verification tests.

The cost factor is passed explicitly here; production code uses
``Settings.BCRYPT_ROUNDS``.
"""

from workout_tracker.core.security import (
    check_password_policy,
    hash_password,
    verify_password,
)

ROUNDS = 4


class TestHashPassword:
    """Test password hashing functionality."""

    def test_hash_password_returns_bcrypt_hash(self):
        hashed = hash_password("SecurePass123!", rounds=ROUNDS)

        assert isinstance(hashed, str)
        assert hashed.startswith("$2b$04$")
        # Standard bcrypt length
        assert len(hashed) == 60

    def test_hash_password_default_cost_factor(self):
        assert hash_password("SecurePass123!").startswith("$2b$12$")

    def test_hash_password_different_for_same_password(self):
        """Same password produces different hashes due to the salt."""
        hash1 = hash_password("SecurePass123!", rounds=ROUNDS)
        hash2 = hash_password("SecurePass123!", rounds=ROUNDS)

        assert hash1 != hash2
        assert verify_password("SecurePass123!", hash1)
        assert verify_password("SecurePass123!", hash2)

    def test_hash_password_never_contains_plaintext(self):
        assert "SecurePass123!" not in hash_password("SecurePass123!", rounds=ROUNDS)

    def test_hash_password_truncates_at_72_bytes(self):
        base = "a" * 72
        hashed = hash_password(base + "tail", rounds=ROUNDS)

        assert verify_password(base, hashed)
        assert verify_password(base + "different-tail", hashed)


class TestVerifyPassword:
    """Test password verification."""

    def test_verify_password_correct(self):
        hashed = hash_password("SecurePass123!", rounds=ROUNDS)
        assert verify_password("SecurePass123!", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("SecurePass123!", rounds=ROUNDS)
        assert verify_password("WrongPass456!", hashed) is False

    def test_verify_password_case_sensitive(self):
        hashed = hash_password("SecurePass123!", rounds=ROUNDS)
        assert verify_password("securepass123!", hashed) is False

    def test_verify_password_missing_hash(self):
        assert verify_password("anything", None) is False
        assert verify_password("anything", "") is False

    def test_verify_password_malformed_hash(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_verify_password_unicode(self):
        hashed = hash_password("pässwörd-日本", rounds=ROUNDS)
        assert verify_password("pässwörd-日本", hashed) is True


class TestPasswordPolicy:
    def test_short_password_rejected(self):
        assert check_password_policy("abc", min_length=6) == [
            "Password must be at least 6 characters"
        ]

    def test_minimum_length_accepted(self):
        assert check_password_policy("abcdef", min_length=6) == []

    def test_whitespace_only_rejected(self):
        problems = check_password_policy("        ", min_length=6)
        assert problems == ["Password must not be only whitespace"]
