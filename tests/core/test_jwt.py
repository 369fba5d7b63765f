"""Access token tests."""

from datetime import timedelta
from uuid import uuid4

from jose import jwt

from workout_tracker.core.jwt import (
    create_access_token,
    decode_access_token,
    verify_token,
)


class TestAccessToken:
    def test_round_trip_returns_subject(self, test_settings):
        user_id = uuid4()
        token = create_access_token(test_settings, user_id)

        assert verify_token(test_settings, token) == str(user_id)

    def test_token_carries_expiry(self, test_settings):
        token = create_access_token(test_settings, "user-1")
        payload = decode_access_token(test_settings, token)

        assert payload is not None
        assert payload["sub"] == "user-1"
        assert "exp" in payload

    def test_expired_token_rejected(self, test_settings):
        token = create_access_token(
            test_settings, "user-1", expires_delta=timedelta(seconds=-1)
        )
        assert verify_token(test_settings, token) is None

    def test_token_signed_with_other_key_rejected(self, test_settings):
        other = test_settings.model_copy(update={"SECRET_KEY": "another-key"})
        token = create_access_token(other, "user-1")

        assert verify_token(test_settings, token) is None

    def test_garbage_token_rejected(self, test_settings):
        assert verify_token(test_settings, "not.a.token") is None

    def test_token_without_subject(self, test_settings):
        token = jwt.encode(
            {"foo": "bar"},
            test_settings.SECRET_KEY,
            algorithm=test_settings.JWT_ALGORITHM,
        )
        assert verify_token(test_settings, token) is None
