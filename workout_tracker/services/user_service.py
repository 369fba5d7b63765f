"""User service layer: the identity store.

This module provides user lookup, creation for local and federated users,
credential verification, login and password changes. Passwords are hashed
off the event loop and never logged.
"""

from __future__ import annotations

import asyncio
import uuid
from contextlib import AbstractAsyncContextManager
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from workout_tracker.core.exceptions import (
    DuplicateKeyError,
    FieldError,
    ValidationError,
)
from workout_tracker.core.logging import get_logger
from workout_tracker.core.security import check_password_policy, hash_password
from workout_tracker.db.session import store_operation
from workout_tracker.models.base import utcnow
from workout_tracker.models.enums import AuthMethod
from workout_tracker.models.user import User
from workout_tracker.services.credentials import (
    CredentialVerifierRegistry,
    FederatedIdentity,
)
from workout_tracker.utils.email import (
    is_valid_email_format,
    normalize_email,
    normalize_username,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from workout_tracker.core.config import Settings


USERNAME_MAX_LENGTH = 50


@lru_cache(maxsize=4)
def _placeholder_hash(rounds: int) -> str:
    """Hash checked against for unknown or non-local usernames, to keep timing flat."""
    return hash_password("placeholder-password", rounds=rounds)


class UserService:
    """Service layer for user identity operations.

    Logging:
        - Logs user creation and authentication outcomes
        - Never logs passwords, hashes or federated subject ids
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        verifiers: CredentialVerifierRegistry | None = None,
    ) -> None:
        """Initialize user service.

        Args:
            session: Async SQLAlchemy session
            settings: Application settings (bcrypt rounds, store timeout, password policy)
            verifiers: Credential verifier registry, defaults to local + federated
        """
        self.session = session
        self.settings = settings
        self.verifiers = verifiers or CredentialVerifierRegistry()
        self.logger = get_logger(__name__)

    def _store(self, operation: str) -> AbstractAsyncContextManager[None]:
        return store_operation(operation, self.settings.STORE_TIMEOUT_SECONDS)

    # =========================================================================
    # Lookups
    # =========================================================================

    async def find_by_id(self, user_id: uuid.UUID | str) -> User | None:
        """Get user by ID, or None if absent or not a valid UUID."""
        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError:
            return None
        async with self._store("find_user_by_id"):
            result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> User | None:
        """Get user by (trimmed) username, or None if absent."""
        normalized = normalize_username(username)
        if not normalized:
            return None
        async with self._store("find_user_by_username"):
            result = await self.session.execute(
                select(User).where(User.username == normalized)
            )
        return result.scalar_one_or_none()

    async def find_by_federated_id(self, provider: str, federated_id: str) -> User | None:
        """Get the user linked to ``federated_id`` at ``provider``, or None."""
        async with self._store("find_user_by_federated_id"):
            result = await self.session.execute(
                select(User).where(
                    User.federated_provider == provider,
                    User.federated_id == federated_id,
                )
            )
        return result.scalar_one_or_none()

    async def _find_taken_fields(self, username: str, email: str) -> list[str]:
        async with self._store("check_user_uniqueness"):
            result = await self.session.execute(
                select(User.username, User.email).where(
                    or_(User.username == username, User.email == email)
                )
            )
        taken: list[str] = []
        for existing_username, existing_email in result.all():
            if existing_username == username and "username" not in taken:
                taken.append("username")
            if existing_email == email and "email" not in taken:
                taken.append("email")
        return taken

    # =========================================================================
    # Creation
    # =========================================================================

    @staticmethod
    def _identity_errors(username: str, email: str) -> list[FieldError]:
        errors: list[FieldError] = []
        if not username:
            errors.append(FieldError("username", "Username is required"))
        elif len(username) > USERNAME_MAX_LENGTH:
            errors.append(
                FieldError(
                    "username",
                    f"Username must be at most {USERNAME_MAX_LENGTH} characters",
                )
            )
        if not email:
            errors.append(FieldError("email", "Email is required"))
        elif not is_valid_email_format(email):
            errors.append(FieldError("email", "Email address is not valid"))
        return errors

    async def create(
        self,
        username: str,
        email: str,
        credential_or_federated_id: str,
        auth_method: AuthMethod | str,
        provider: str | None = None,
    ) -> User:
        """Create a local or federated user.

        For local users the credential is a plain password and is hashed
        before storage. For federated users it is the provider's subject id.

        Raises:
            ValidationError: If identity fields are blank or malformed
            DuplicateKeyError: If the username, email or federated identity exists
        """
        username = normalize_username(username)
        email = normalize_email(email)

        errors = self._identity_errors(username, email)
        try:
            method = AuthMethod(auth_method)
        except ValueError:
            method = None
            errors.append(FieldError("auth_method", f"Unknown auth method '{auth_method}'"))
        if not credential_or_federated_id:
            errors.append(FieldError("credential", "Credential is required"))
        if method is AuthMethod.FEDERATED and not provider:
            errors.append(FieldError("provider", "Provider is required for federated users"))
        if errors:
            raise ValidationError(errors)

        self.logger.info(
            "Attempting to create user",
            extra={
                "context": {
                    "username": username,
                    "auth_method": method.value,
                    "action": "create_user",
                }
            },
        )

        taken = await self._find_taken_fields(username, email)
        if method is AuthMethod.FEDERATED and await self.find_by_federated_id(
            provider, credential_or_federated_id
        ):
            taken.append("federated_id")
        if taken:
            self.logger.warning(
                "User creation rejected: duplicate identity",
                extra={"context": {"fields": taken, "action": "create_user"}},
            )
            raise DuplicateKeyError(taken)

        if method is AuthMethod.LOCAL:
            hashed = await asyncio.to_thread(
                hash_password, credential_or_federated_id, self.settings.BCRYPT_ROUNDS
            )
            user = User(
                username=username,
                email=email,
                hashed_password=hashed,
                auth_method=AuthMethod.LOCAL.value,
            )
        else:
            user = User(
                username=username,
                email=email,
                auth_method=AuthMethod.FEDERATED.value,
                federated_provider=provider,
                federated_id=credential_or_federated_id,
            )

        self.session.add(user)
        try:
            async with self._store("create_user"):
                await self.session.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same identity
            await self.session.rollback()
            raise DuplicateKeyError(["username", "email"]) from e

        self.logger.info(
            "User created successfully",
            extra={
                "context": {
                    "user_id": str(user.id),
                    "auth_method": method.value,
                    "action": "create_user",
                    "status": "success",
                }
            },
        )
        return user

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> User:
        """Register a local user, reporting every input problem together.

        Raises:
            ValidationError: Blank fields, short password, or mismatched confirmation
            DuplicateKeyError: If the username or email is taken
        """
        errors = self._identity_errors(normalize_username(username), normalize_email(email))
        for problem in check_password_policy(password, self.settings.PASSWORD_MIN_LENGTH):
            errors.append(FieldError("password", problem))
        if password != confirm_password:
            errors.append(FieldError("confirm_password", "Passwords do not match"))
        if errors:
            raise ValidationError(errors)

        return await self.create(username, email, password, AuthMethod.LOCAL)

    async def find_or_create_federated(self, identity: FederatedIdentity) -> User:
        """Return the user linked to a provider identity, provisioning it if new.

        Raises:
            ValidationError: If a new user would lack a username or email
            DuplicateKeyError: If the provider's username or email is already taken
        """
        user = await self.find_by_federated_id(identity.provider, identity.subject)
        if user is not None:
            return user

        self.logger.info(
            "Provisioning federated user",
            extra={"context": {"provider": identity.provider, "action": "federated_login"}},
        )
        return await self.create(
            username=identity.username or "",
            email=identity.email or "",
            credential_or_federated_id=identity.subject,
            auth_method=AuthMethod.FEDERATED,
            provider=identity.provider,
        )

    # =========================================================================
    # Verification
    # =========================================================================

    async def verify_credential(self, user: User, candidate: object) -> bool:
        """Check a presented credential using the verifier for the user's method.

        A password presented for a federated user never verifies.
        """
        verifier = self.verifiers.get(user.auth_method)
        result = await asyncio.to_thread(verifier.verify, user, candidate)

        self.logger.debug(
            "Credential verification completed",
            extra={
                "context": {
                    "user_id": str(user.id),
                    "auth_method": user.auth_method,
                    "result": result,
                }
            },
        )
        return result

    async def _placeholder_check(self, password: str) -> None:
        await asyncio.to_thread(
            self.verifiers.get(AuthMethod.LOCAL).verify,
            User(hashed_password=_placeholder_hash(self.settings.BCRYPT_ROUNDS)),
            password,
        )

    async def authenticate(self, username: str, password: str) -> User | None:
        """Authenticate a local user with username and password.

        Returns:
            The user, or None for an unknown username or wrong password alike

        Security:
            - An unknown or federated username still costs one bcrypt check
            - Does not log the password
        """
        user = await self.find_by_username(username)

        if user is None or not user.is_local:
            await self._placeholder_check(password)
            reason = "user_not_found" if user is None else "not_local_user"
            self.logger.warning(
                "Authentication failed",
                extra={"context": {"action": "authenticate", "reason": reason}},
            )
            return None

        if not await self.verify_credential(user, password):
            self.logger.warning(
                "Authentication failed",
                extra={
                    "context": {
                        "user_id": str(user.id),
                        "action": "authenticate",
                        "reason": "invalid_credential",
                    }
                },
            )
            return None

        self.logger.info(
            "Authentication successful",
            extra={"context": {"user_id": str(user.id), "action": "authenticate"}},
        )
        return user

    async def change_password(
        self,
        user_id: uuid.UUID | str,
        old_password: str,
        new_password: str,
    ) -> bool:
        """Change a local user's password.

        Returns:
            True if changed, False if the user is unknown, not local, or the old password is wrong

        Raises:
            ValidationError: If the new password violates the password policy
        """
        user = await self.find_by_id(user_id)
        if user is None or not user.is_local:
            return False

        if not await self.verify_credential(user, old_password):
            self.logger.warning(
                "Password change failed",
                extra={
                    "context": {
                        "user_id": str(user.id),
                        "action": "change_password",
                        "reason": "invalid_old_credential",
                    }
                },
            )
            return False

        problems = check_password_policy(new_password, self.settings.PASSWORD_MIN_LENGTH)
        if problems:
            raise ValidationError([FieldError("new_password", p) for p in problems])

        user.hashed_password = await asyncio.to_thread(
            hash_password, new_password, self.settings.BCRYPT_ROUNDS
        )
        user.updated_at = utcnow()
        async with self._store("change_password"):
            await self.session.flush()

        self.logger.info(
            "Password changed successfully",
            extra={"context": {"user_id": str(user.id), "action": "change_password"}},
        )
        return True


__all__ = [
    "UserService",
]
