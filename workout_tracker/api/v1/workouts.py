"""Workout API Router.

This module provides REST API endpoints for managing the current user's
workouts, plus the public listing and scoped search.

Request bodies are passed to the workout service as raw mappings so every
field problem is reported in one 422 response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Body, Query, status

from workout_tracker.api.deps import (
    CurrentPrincipal,
    OptionalPrincipal,
    Pagination,
    Workouts,
)
from workout_tracker.models.enums import SearchScope
from workout_tracker.schemas.base import PaginatedResponse
from workout_tracker.schemas.workout import PublicWorkoutResponse, WorkoutResponse

if TYPE_CHECKING:
    from workout_tracker.models.workout import Workout

router = APIRouter()

WorkoutBody = Annotated[dict[str, Any], Body(description="Workout field values")]
SearchText = Annotated[
    str | None,
    Query(alias="search", max_length=200, description="Keyword filter"),
]


def _public_response(workout: Workout, owner_username: str | None = None) -> PublicWorkoutResponse:
    if owner_username is None:
        owner_username = workout.owner.username
    return PublicWorkoutResponse.model_validate(workout).model_copy(
        update={"owner_username": owner_username}
    )


# =============================================================================
# Collection Endpoints
# =============================================================================


@router.get(
    "",
    response_model=PaginatedResponse[WorkoutResponse],
    summary="List my workouts",
    description="The current user's workouts, newest first, optionally filtered by keywords.",
)
async def list_workouts(
    principal: CurrentPrincipal,
    workouts: Workouts,
    pagination: Pagination,
    search: SearchText = None,
) -> PaginatedResponse[WorkoutResponse]:
    items = await workouts.list(
        principal, search, skip=pagination.skip, limit=pagination.limit
    )
    total = await workouts.count(SearchScope.MINE, search, principal)
    return PaginatedResponse.create(
        items=[WorkoutResponse.model_validate(w) for w in items],
        total=total,
        skip=pagination.skip,
        limit=pagination.limit,
    )


@router.post(
    "",
    response_model=WorkoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a workout",
)
async def create_workout(
    principal: CurrentPrincipal,
    workouts: Workouts,
    fields: WorkoutBody,
) -> WorkoutResponse:
    """Create a workout owned by the current user.

    Args:
        principal: Current user.
        workouts: Workout service.
        fields: Raw field values; unknown keys such as owner_id are rejected.

    Returns:
        The created workout.
    """
    workout = await workouts.create(principal, fields)
    return WorkoutResponse.model_validate(workout)


@router.get(
    "/public",
    response_model=PaginatedResponse[PublicWorkoutResponse],
    summary="List all workouts",
    description="Every user's workouts, newest first, with the owner's username. No login required.",
)
async def list_public_workouts(
    workouts: Workouts,
    pagination: Pagination,
    search: SearchText = None,
) -> PaginatedResponse[PublicWorkoutResponse]:
    items = await workouts.search(
        SearchScope.PUBLIC,
        search,
        skip=pagination.skip,
        limit=pagination.limit,
        by_relevance=False,
    )
    total = await workouts.count(SearchScope.PUBLIC, search)
    return PaginatedResponse.create(
        items=[_public_response(w) for w in items],
        total=total,
        skip=pagination.skip,
        limit=pagination.limit,
    )


@router.get(
    "/search",
    response_model=PaginatedResponse[PublicWorkoutResponse],
    summary="Search workouts by relevance",
)
async def search_workouts(
    principal: OptionalPrincipal,
    workouts: Workouts,
    pagination: Pagination,
    scope: Annotated[SearchScope, Query(description="mine or public")] = SearchScope.MINE,
    q: Annotated[str | None, Query(max_length=200, description="Search query")] = None,
) -> PaginatedResponse[PublicWorkoutResponse]:
    """Search workouts ranked by match score, then date.

    Words prefixed with ``-`` exclude workouts containing them. Searching
    ``mine`` requires authentication.
    """
    items = await workouts.search(
        scope, q, principal, skip=pagination.skip, limit=pagination.limit
    )
    total = await workouts.count(scope, q, principal)

    if scope is SearchScope.MINE:
        responses = [_public_response(w, principal.username) for w in items]
    else:
        responses = [_public_response(w) for w in items]

    return PaginatedResponse.create(
        items=responses,
        total=total,
        skip=pagination.skip,
        limit=pagination.limit,
    )


# =============================================================================
# Record Endpoints
# =============================================================================


@router.get(
    "/{workout_id}",
    response_model=WorkoutResponse,
    summary="Get a workout",
)
async def get_workout(
    workout_id: str,
    principal: CurrentPrincipal,
    workouts: Workouts,
) -> WorkoutResponse:
    workout = await workouts.get(principal, workout_id)
    return WorkoutResponse.model_validate(workout)


@router.put(
    "/{workout_id}",
    response_model=WorkoutResponse,
    summary="Replace a workout",
)
async def update_workout(
    workout_id: str,
    principal: CurrentPrincipal,
    workouts: Workouts,
    fields: WorkoutBody,
) -> WorkoutResponse:
    """Replace the editable fields of a workout.

    Omitted optional fields are cleared and an omitted date is kept.
    """
    workout = await workouts.update(principal, workout_id, fields)
    return WorkoutResponse.model_validate(workout)


@router.delete(
    "/{workout_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a workout",
)
async def delete_workout(
    workout_id: str,
    principal: CurrentPrincipal,
    workouts: Workouts,
) -> None:
    await workouts.delete(principal, workout_id)
