"""Workout service layer.

Ownership-scoped CRUD and search over workouts. Every record-scoped lookup
includes the principal in its predicate, so a workout owned by someone else
is indistinguishable from one that does not exist.
"""

from __future__ import annotations

import uuid
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from workout_tracker.core.exceptions import (
    FieldError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from workout_tracker.core.logging import get_logger
from workout_tracker.db.session import store_operation
from workout_tracker.models.base import utcnow
from workout_tracker.models.enums import SearchScope
from workout_tracker.models.workout import Workout
from workout_tracker.schemas.workout import WorkoutFields, parse_workout_fields
from workout_tracker.services.text_search import (
    SearchQuery,
    index_text,
    parse_query,
    rank_workouts,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import ColumnElement, Select

    from workout_tracker.core.config import Settings
    from workout_tracker.core.principal import Principal


class WorkoutService:
    """Service layer for workout operations.

    Record-scoped operations raise NotFoundError for both absent and
    not-owned workouts. Field validation happens before any store access.
    """

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        """Initialize workout service.

        Args:
            session: Async SQLAlchemy session
            settings: Application settings (store timeout)
        """
        self.session = session
        self.settings = settings
        self.logger = get_logger(__name__)

    def _store(self, operation: str) -> AbstractAsyncContextManager[None]:
        return store_operation(operation, self.settings.STORE_TIMEOUT_SECONDS)

    @staticmethod
    def _require_principal(principal: Principal | None) -> Principal:
        if principal is None:
            raise UnauthorizedError()
        return principal

    @staticmethod
    def _parse_scope(scope: SearchScope | str) -> SearchScope:
        try:
            return SearchScope(scope)
        except ValueError:
            raise ValidationError(
                [FieldError("scope", "Scope must be 'mine' or 'public'")]
            ) from None

    @staticmethod
    def _to_values(fields: WorkoutFields) -> dict[str, Any]:
        values = fields.model_dump()
        values["category"] = fields.category.value
        values["intensity"] = fields.intensity.value
        return values

    async def _get_owned(
        self,
        principal: Principal,
        workout_id: uuid.UUID | str,
        operation: str,
    ) -> Workout:
        try:
            parsed_id = uuid.UUID(str(workout_id))
        except ValueError:
            raise NotFoundError("workout", workout_id) from None

        async with self._store(operation):
            result = await self.session.execute(
                select(Workout).where(
                    Workout.id == parsed_id,
                    Workout.owner_id == principal.id,
                )
            )
        workout = result.scalar_one_or_none()
        if workout is None:
            raise NotFoundError("workout", workout_id)
        return workout

    # =========================================================================
    # CRUD
    # =========================================================================

    async def create(
        self,
        principal: Principal | None,
        fields: Mapping[str, Any],
    ) -> Workout:
        """Create a workout owned by the principal.

        Args:
            principal: Authenticated caller
            fields: Raw field values (form strings are coerced)

        Returns:
            Created workout with generated id and timestamps

        Raises:
            UnauthorizedError: If no principal is given
            ValidationError: With every rejected field
        """
        principal = self._require_principal(principal)
        values = self._to_values(parse_workout_fields(fields))
        if values["date"] is None:
            del values["date"]

        workout = Workout(owner_id=principal.id, **values)
        workout.search_index = index_text(workout)
        self.session.add(workout)
        async with self._store("create_workout"):
            await self.session.flush()

        self.logger.info(
            "Workout created",
            extra={
                "context": {
                    "workout_id": str(workout.id),
                    "owner_id": str(principal.id),
                    "action": "create_workout",
                }
            },
        )
        return workout

    async def get(self, principal: Principal | None, workout_id: uuid.UUID | str) -> Workout:
        """Get one of the principal's workouts.

        Raises:
            UnauthorizedError: If no principal is given
            NotFoundError: If absent or owned by someone else
        """
        principal = self._require_principal(principal)
        return await self._get_owned(principal, workout_id, "get_workout")

    async def update(
        self,
        principal: Principal | None,
        workout_id: uuid.UUID | str,
        fields: Mapping[str, Any],
    ) -> Workout:
        """Replace the editable fields of one of the principal's workouts.

        Omitted optional fields are cleared; an omitted date keeps the stored
        one. ``owner_id`` and other server-assigned fields are rejected.

        Raises:
            UnauthorizedError: If no principal is given
            ValidationError: With every rejected field
            NotFoundError: If absent or owned by someone else
        """
        principal = self._require_principal(principal)
        values = self._to_values(parse_workout_fields(fields))
        workout = await self._get_owned(principal, workout_id, "update_workout")

        if values["date"] is None:
            del values["date"]
        for key, value in values.items():
            setattr(workout, key, value)
        workout.search_index = index_text(workout)
        workout.updated_at = utcnow()

        async with self._store("update_workout"):
            await self.session.flush()

        self.logger.info(
            "Workout updated",
            extra={
                "context": {
                    "workout_id": str(workout.id),
                    "owner_id": str(principal.id),
                    "action": "update_workout",
                }
            },
        )
        return workout

    async def delete(self, principal: Principal | None, workout_id: uuid.UUID | str) -> None:
        """Permanently remove one of the principal's workouts.

        Raises:
            UnauthorizedError: If no principal is given
            NotFoundError: If absent (including already deleted) or not owned
        """
        principal = self._require_principal(principal)
        workout = await self._get_owned(principal, workout_id, "delete_workout")

        async with self._store("delete_workout"):
            await self.session.delete(workout)
            await self.session.flush()

        self.logger.info(
            "Workout deleted",
            extra={
                "context": {
                    "workout_id": str(workout_id),
                    "owner_id": str(principal.id),
                    "action": "delete_workout",
                }
            },
        )

    # =========================================================================
    # Listing and search
    # =========================================================================

    def _scope_conditions(
        self,
        scope: SearchScope,
        principal: Principal | None,
    ) -> list[ColumnElement[bool]]:
        if scope is SearchScope.MINE:
            return [Workout.owner_id == self._require_principal(principal).id]
        return []

    def _scoped_select(
        self,
        scope: SearchScope,
        principal: Principal | None,
    ) -> Select[tuple[Workout]]:
        stmt = select(Workout).where(*self._scope_conditions(scope, principal))
        if scope is SearchScope.PUBLIC:
            stmt = stmt.options(selectinload(Workout.owner))
        return stmt

    @staticmethod
    def _term_filter(query: SearchQuery) -> ColumnElement[bool]:
        return or_(
            *(
                Workout.search_index.contains(f" {term} ", autoescape=True)
                for term in query.positive
            )
        )

    async def list(
        self,
        principal: Principal | None,
        query: str | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Workout]:
        """List the principal's workouts, newest date first.

        A query narrows the list to matching workouts without changing the
        date ordering.
        """
        return await self.search(
            SearchScope.MINE,
            query,
            principal,
            skip=skip,
            limit=limit,
            by_relevance=False,
        )

    async def search(
        self,
        scope: SearchScope | str,
        query: str | None = None,
        principal: Principal | None = None,
        skip: int = 0,
        limit: int | None = None,
        by_relevance: bool = True,
    ) -> list[Workout]:
        """Search workouts in the given scope.

        A blank or absent query returns the whole scope ordered by date
        descending, then id ascending. Otherwise results are ranked by score,
        then date, then id. ``skip``/``limit`` apply after ordering.

        Public results come with ``owner`` loaded.

        Raises:
            UnauthorizedError: If scope is ``mine`` and no principal is given
            ValidationError: If scope is not a known SearchScope
        """
        scope = self._parse_scope(scope)
        stmt = self._scoped_select(scope, principal)
        parsed = parse_query(query)

        if parsed.blank:
            stmt = stmt.order_by(Workout.date.desc(), Workout.id.asc()).offset(skip)
            if limit is not None:
                stmt = stmt.limit(limit)
            async with self._store("search_workouts"):
                result = await self.session.execute(stmt)
            return list(result.scalars().all())

        ranked = await self._ranked_matches(stmt, parsed, by_relevance)
        self.logger.debug(
            "Workout search completed",
            extra={
                "context": {
                    "scope": scope.value,
                    "terms": len(parsed.positive),
                    "matches": len(ranked),
                }
            },
        )
        end = None if limit is None else skip + limit
        return ranked[skip:end]

    async def count(
        self,
        scope: SearchScope | str,
        query: str | None = None,
        principal: Principal | None = None,
    ) -> int:
        """Count the workouts ``search`` would return without pagination.

        Raises:
            UnauthorizedError: If scope is ``mine`` and no principal is given
            ValidationError: If scope is not a known SearchScope
        """
        scope = self._parse_scope(scope)
        parsed = parse_query(query)

        if parsed.blank:
            count_stmt = (
                select(func.count())
                .select_from(Workout)
                .where(*self._scope_conditions(scope, principal))
            )
            async with self._store("count_workouts"):
                result = await self.session.execute(count_stmt)
            return result.scalar_one()

        stmt = self._scoped_select(scope, principal)
        return len(await self._ranked_matches(stmt, parsed, by_relevance=False))

    async def _ranked_matches(
        self,
        stmt: Select[tuple[Workout]],
        query: SearchQuery,
        by_relevance: bool,
    ) -> list[Workout]:
        if not query.searchable:
            return []

        async with self._store("search_workouts"):
            result = await self.session.execute(stmt.where(self._term_filter(query)))
        return rank_workouts(result.scalars().all(), query, by_relevance=by_relevance)


__all__ = [
    "WorkoutService",
]
