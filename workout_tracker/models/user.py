"""User model for authentication and workout ownership."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workout_tracker.models.base import Base, TimestampMixin, UUIDMixin
from workout_tracker.models.enums import AuthMethod

if TYPE_CHECKING:
    from workout_tracker.models.workout import Workout


class User(UUIDMixin, TimestampMixin, Base):
    """User model for authentication and resource ownership.

    Attributes:
        id: UUID primary key (from UUIDMixin)
        username: Unique, trimmed login name
        email: Unique email address, stored lowercase
        hashed_password: Bcrypt hash, only for local users
        auth_method: "local" or "federated"
        federated_provider: Identity provider name, only for federated users
        federated_id: Subject id at the provider, only for federated users
        created_at: Timestamp of creation (from TimestampMixin)
        updated_at: Timestamp of last update (from TimestampMixin)
        workouts: Relationship to owned Workout models

    Security:
        - A user holds either a password hash or a federated identity, never both
        - Email addresses are case-insensitive (normalized to lowercase)
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint(
            "federated_provider",
            "federated_id",
            name="uq_users_federated_identity",
        ),
        CheckConstraint(
            "(auth_method = 'local' AND hashed_password IS NOT NULL"
            " AND federated_id IS NULL)"
            " OR (auth_method = 'federated' AND federated_id IS NOT NULL"
            " AND federated_provider IS NOT NULL AND hashed_password IS NULL)",
            name="ck_users_single_credential",
        ),
    )

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    hashed_password: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    auth_method: Mapped[AuthMethod] = mapped_column(
        String(20),
        nullable=False,
        default=AuthMethod.LOCAL.value,
    )

    federated_provider: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )

    federated_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    workouts: Mapped[list[Workout]] = relationship(
        "Workout",
        back_populates="owner",
        lazy="raise",
    )

    def __repr__(self) -> str:
        """Return string representation of the user."""
        return f"<User(id={self.id}, username='{self.username}')>"

    @property
    def is_local(self) -> bool:
        return self.auth_method == AuthMethod.LOCAL


__all__ = ["User"]
