"""The acting identity passed into service operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from workout_tracker.models.user import User


@dataclass(frozen=True)
class Principal:
    """Authenticated identity on whose behalf an operation executes.

    Resolved by the route layer; services only read ``id``.
    """

    id: UUID
    username: str

    @classmethod
    def from_user(cls, user: User) -> Principal:
        return cls(id=user.id, username=user.username)


__all__ = ["Principal"]
