"""Business logic services.

This package contains the identity store and the workout repository.
"""

from workout_tracker.services.credentials import (
    CredentialVerifier,
    CredentialVerifierRegistry,
    FederatedCredentialVerifier,
    FederatedIdentity,
    LocalCredentialVerifier,
)
from workout_tracker.services.user_service import UserService
from workout_tracker.services.workout_service import WorkoutService

__all__ = [
    "CredentialVerifier",
    "CredentialVerifierRegistry",
    "FederatedCredentialVerifier",
    "FederatedIdentity",
    "LocalCredentialVerifier",
    "UserService",
    "WorkoutService",
]
