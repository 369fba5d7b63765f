"""User service tests.

Covers user creation for both authentication methods, uniqueness,
credential verification, login, registration and password change.
"""

from uuid import uuid4

import pytest

from workout_tracker.core.exceptions import DuplicateKeyError, ValidationError
from workout_tracker.models.enums import AuthMethod
from workout_tracker.services.credentials import FederatedIdentity, LocalCredentialVerifier

# Password of the test_user fixture
TEST_PASSWORD = "test_password"


def _fields(exc: ValidationError) -> set[str]:
    return {error.field for error in exc.errors}


class TestCreateUser:
    async def test_create_local_user_hashes_password(self, user_service):
        user = await user_service.create(
            "walker", "walker@example.com", "PlainPass123!", AuthMethod.LOCAL
        )

        assert user.id is not None
        assert user.auth_method == AuthMethod.LOCAL.value
        assert user.hashed_password.startswith("$2b$04$")
        assert user.hashed_password != "PlainPass123!"
        assert user.federated_id is None

    async def test_create_user_normalizes_identity(self, user_service):
        user = await user_service.create(
            "  walker  ", "  Walker@Example.COM ", "PlainPass123!", AuthMethod.LOCAL
        )

        assert user.username == "walker"
        assert user.email == "walker@example.com"

    async def test_duplicate_username_rejected(self, user_service, test_user):
        with pytest.raises(DuplicateKeyError) as exc_info:
            await user_service.create(
                "runner", "new@example.com", "PlainPass123!", AuthMethod.LOCAL
            )
        assert exc_info.value.fields == ["username"]
        assert exc_info.value.kind == "duplicate_key"

    async def test_duplicate_email_rejected_case_insensitively(self, user_service, test_user):
        with pytest.raises(DuplicateKeyError) as exc_info:
            await user_service.create(
                "someone", "RUNNER@example.com", "PlainPass123!", AuthMethod.LOCAL
            )
        assert exc_info.value.fields == ["email"]

    async def test_blank_identity_fields_reported_together(self, user_service):
        with pytest.raises(ValidationError) as exc_info:
            await user_service.create("   ", "", "", AuthMethod.LOCAL)

        assert _fields(exc_info.value) == {"username", "email", "credential"}

    async def test_malformed_email_rejected(self, user_service):
        with pytest.raises(ValidationError) as exc_info:
            await user_service.create("walker", "not-an-email", "pw123456", AuthMethod.LOCAL)
        assert _fields(exc_info.value) == {"email"}

    async def test_federated_user_requires_provider(self, user_service):
        with pytest.raises(ValidationError) as exc_info:
            await user_service.create(
                "fed", "fed@example.com", "google-sub-1", AuthMethod.FEDERATED
            )
        assert _fields(exc_info.value) == {"provider"}

    async def test_create_federated_user_has_no_password(self, user_service):
        user = await user_service.create(
            "fed",
            "fed@example.com",
            "google-sub-1",
            AuthMethod.FEDERATED,
            provider="google",
        )

        assert user.auth_method == AuthMethod.FEDERATED.value
        assert user.hashed_password is None
        assert user.federated_provider == "google"
        assert user.federated_id == "google-sub-1"

    async def test_duplicate_federated_identity_rejected(self, user_service):
        await user_service.create(
            "fed", "fed@example.com", "sub-1", AuthMethod.FEDERATED, provider="google"
        )
        with pytest.raises(DuplicateKeyError) as exc_info:
            await user_service.create(
                "fed2", "fed2@example.com", "sub-1", AuthMethod.FEDERATED, provider="google"
            )
        assert exc_info.value.fields == ["federated_id"]


class TestFindUser:
    async def test_find_by_id(self, user_service, test_user):
        assert await user_service.find_by_id(test_user.id) is test_user
        assert await user_service.find_by_id(str(test_user.id)) is test_user

    async def test_find_by_id_unknown_or_malformed(self, user_service, test_user):
        assert await user_service.find_by_id(uuid4()) is None
        assert await user_service.find_by_id("not-a-uuid") is None

    async def test_find_by_username_trims(self, user_service, test_user):
        assert await user_service.find_by_username("  runner ") is test_user
        assert await user_service.find_by_username("nobody") is None
        assert await user_service.find_by_username("") is None

    async def test_find_by_federated_id(self, user_service):
        user = await user_service.create(
            "fed", "fed@example.com", "sub-1", AuthMethod.FEDERATED, provider="google"
        )

        assert await user_service.find_by_federated_id("google", "sub-1") is user
        assert await user_service.find_by_federated_id("github", "sub-1") is None


class TestVerifyCredential:
    async def test_local_password(self, user_service, test_user):
        assert await user_service.verify_credential(test_user, TEST_PASSWORD) is True
        assert await user_service.verify_credential(test_user, "wrong") is False

    async def test_local_user_rejects_federated_identity(self, user_service, test_user):
        identity = FederatedIdentity(provider="google", subject="sub-1")
        assert await user_service.verify_credential(test_user, identity) is False

    async def test_federated_user_never_accepts_password(self, user_service):
        user = await user_service.create(
            "fed", "fed@example.com", "sub-1", AuthMethod.FEDERATED, provider="google"
        )

        assert await user_service.verify_credential(user, "sub-1") is False
        assert await user_service.verify_credential(user, "") is False

    async def test_federated_identity(self, user_service):
        user = await user_service.create(
            "fed", "fed@example.com", "sub-1", AuthMethod.FEDERATED, provider="google"
        )

        assert await user_service.verify_credential(
            user, FederatedIdentity(provider="google", subject="sub-1")
        )
        assert not await user_service.verify_credential(
            user, FederatedIdentity(provider="google", subject="sub-2")
        )
        assert not await user_service.verify_credential(
            user, FederatedIdentity(provider="github", subject="sub-1")
        )


class TestAuthenticate:
    async def test_authenticate_success(self, user_service, test_user):
        assert await user_service.authenticate("runner", TEST_PASSWORD) is test_user

    async def test_authenticate_wrong_password(self, user_service, test_user):
        assert await user_service.authenticate("runner", "wrong") is None

    async def test_authenticate_unknown_user(self, user_service, test_user):
        assert await user_service.authenticate("nobody", TEST_PASSWORD) is None

    async def test_authenticate_federated_user_with_password(self, user_service):
        await user_service.create(
            "fed", "fed@example.com", "sub-1", AuthMethod.FEDERATED, provider="google"
        )
        assert await user_service.authenticate("fed", "sub-1") is None

    @pytest.mark.parametrize("username", ["nobody", "fed"])
    async def test_non_local_login_still_runs_one_bcrypt_check(
        self, user_service, monkeypatch, username
    ):
        await user_service.create(
            "fed", "fed@example.com", "sub-1", AuthMethod.FEDERATED, provider="google"
        )
        calls = []
        original_verify = LocalCredentialVerifier.verify

        def counting_verify(self, user, credential):
            calls.append(user.hashed_password)
            return original_verify(self, user, credential)

        monkeypatch.setattr(LocalCredentialVerifier, "verify", counting_verify)

        assert await user_service.authenticate(username, "sub-1") is None
        assert len(calls) == 1
        assert calls[0].startswith("$2b$04$")


class TestRegister:
    async def test_register_creates_local_user(self, user_service):
        user = await user_service.register(
            "walker", "walker@example.com", "secret1", "secret1"
        )

        assert user.auth_method == AuthMethod.LOCAL.value
        assert await user_service.authenticate("walker", "secret1") is user

    async def test_register_reports_all_problems(self, user_service):
        with pytest.raises(ValidationError) as exc_info:
            await user_service.register("", "walker@example.com", "abc", "abd")

        assert _fields(exc_info.value) == {"username", "password", "confirm_password"}

    async def test_register_duplicate(self, user_service, test_user):
        with pytest.raises(DuplicateKeyError):
            await user_service.register("runner", "x@example.com", "secret1", "secret1")


class TestFederatedLogin:
    async def test_find_or_create_provisions_once(self, user_service):
        identity = FederatedIdentity(
            provider="google",
            subject="sub-1",
            username="fed",
            email="fed@example.com",
        )

        first = await user_service.find_or_create_federated(identity)
        second = await user_service.find_or_create_federated(identity)

        assert first.id == second.id
        assert first.auth_method == AuthMethod.FEDERATED.value

    async def test_find_or_create_requires_email(self, user_service):
        identity = FederatedIdentity(provider="google", subject="sub-1", username="fed")

        with pytest.raises(ValidationError) as exc_info:
            await user_service.find_or_create_federated(identity)
        assert _fields(exc_info.value) == {"email"}


class TestChangePassword:
    async def test_change_password(self, user_service, test_user):
        old_hash = test_user.hashed_password

        assert await user_service.change_password(test_user.id, TEST_PASSWORD, "new-secret")
        assert test_user.hashed_password != old_hash
        assert await user_service.authenticate("runner", "new-secret") is test_user
        assert await user_service.authenticate("runner", TEST_PASSWORD) is None

    async def test_change_password_wrong_old_password(self, user_service, test_user):
        assert not await user_service.change_password(test_user.id, "wrong", "new-secret")

    async def test_change_password_unknown_user(self, user_service):
        assert not await user_service.change_password(uuid4(), "x", "new-secret")

    async def test_change_password_policy(self, user_service, test_user):
        with pytest.raises(ValidationError) as exc_info:
            await user_service.change_password(test_user.id, TEST_PASSWORD, "abc")
        assert _fields(exc_info.value) == {"new_password"}
