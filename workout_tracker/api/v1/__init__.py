"""API v1 routing configuration.

This module defines all v1 API routes.
"""

from fastapi import APIRouter

from workout_tracker.api.v1 import auth, workouts

router = APIRouter()

# Domain routers
router.include_router(auth.router, prefix="/auth", tags=["Auth"])
router.include_router(workouts.router, prefix="/workouts", tags=["Workouts"])


@router.get("/status", tags=["Status"])
async def api_status() -> dict[str, str]:
    """API v1 status check."""
    return {"status": "ok", "version": "v1"}
