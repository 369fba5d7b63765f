"""Credential verification variants.

Each authentication method has its own verifier. The identity service picks
one from a registry by the user's ``auth_method`` and delegates to it instead
of branching on the method itself.
"""

from __future__ import annotations

import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from workout_tracker.core.security import verify_password
from workout_tracker.models.enums import AuthMethod

if TYPE_CHECKING:
    from workout_tracker.models.user import User


@dataclass(frozen=True)
class FederatedIdentity:
    """An identity already verified by an external provider.

    Produced by the OAuth callback handling, which lives outside this
    package; only the provider name and the provider's subject id are used
    for verification.
    """

    provider: str
    subject: str
    username: str | None = None
    email: str | None = None


class CredentialVerifier(ABC):
    """Checks a presented credential against a stored user."""

    auth_method: ClassVar[AuthMethod]

    @abstractmethod
    def verify(self, user: User, credential: object) -> bool:
        """Return True if ``credential`` proves the caller is ``user``.

        Must not raise for credentials of the wrong type; those fail.
        """


class LocalCredentialVerifier(CredentialVerifier):
    """Password check against the stored bcrypt hash."""

    auth_method = AuthMethod.LOCAL

    def verify(self, user: User, credential: object) -> bool:
        if not isinstance(credential, str):
            return False
        return verify_password(credential, user.hashed_password)


class FederatedCredentialVerifier(CredentialVerifier):
    """Provider identity check; passwords never verify here."""

    auth_method = AuthMethod.FEDERATED

    def verify(self, user: User, credential: object) -> bool:
        if not isinstance(credential, FederatedIdentity):
            return False
        if user.federated_provider is None or user.federated_id is None:
            return False

        provider_matches = hmac.compare_digest(
            credential.provider.encode("utf-8"),
            user.federated_provider.encode("utf-8"),
        )
        subject_matches = hmac.compare_digest(
            credential.subject.encode("utf-8"),
            user.federated_id.encode("utf-8"),
        )
        return provider_matches and subject_matches


class CredentialVerifierRegistry:
    """Lookup of verifiers by authentication method.

    Example:
        >>> registry = CredentialVerifierRegistry()
        >>> registry.get(AuthMethod.LOCAL)
        <...LocalCredentialVerifier object at ...>
    """

    def __init__(self, verifiers: list[CredentialVerifier] | None = None) -> None:
        if verifiers is None:
            verifiers = [LocalCredentialVerifier(), FederatedCredentialVerifier()]
        self._verifiers: dict[AuthMethod, CredentialVerifier] = {}
        for verifier in verifiers:
            self.register(verifier)

    def register(self, verifier: CredentialVerifier) -> None:
        """Add or replace the verifier for its method."""
        self._verifiers[verifier.auth_method] = verifier

    def get(self, auth_method: AuthMethod | str) -> CredentialVerifier:
        """Return the verifier for ``auth_method``.

        Raises:
            KeyError: If no verifier handles the method.
        """
        method = AuthMethod(auth_method)
        try:
            return self._verifiers[method]
        except KeyError:
            raise KeyError(f"No credential verifier registered for '{method}'") from None


__all__ = [
    "CredentialVerifier",
    "CredentialVerifierRegistry",
    "FederatedCredentialVerifier",
    "FederatedIdentity",
    "LocalCredentialVerifier",
]
