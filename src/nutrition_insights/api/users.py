"""Profile endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from nutrition_insights.api.auth import require_user_id
from nutrition_insights.api.models import (
    NutritionPlanRequest,
    plan_payload,
    profile_payload,
)
from nutrition_insights.domain.profile_updates import ProfileUpdate  # noqa: TC001
from nutrition_insights.services.plans import IncompleteProfileError, plan_for_profile
from nutrition_insights.services.profiles import ProfileNotFoundError

if TYPE_CHECKING:
    from nutrition_insights.containers import AppContainer

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me")
async def get_profile(
    request: Request, user_id: UUID = Depends(require_user_id)
) -> dict[str, object]:
    """Return the authenticated user's profile."""
    container: AppContainer = request.app.state.container
    try:
        profile = container.profile_service.get_profile(user_id)
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found"
        ) from exc
    return {"success": True, "user": profile_payload(profile)}


@router.patch("/me")
async def update_profile(
    request: Request,
    update: ProfileUpdate = Body(...),
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Apply a single-field profile update."""
    container: AppContainer = request.app.state.container
    try:
        profile = container.profile_service.apply_update(user_id, update)
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found"
        ) from exc
    return {"success": True, "user": profile_payload(profile)}


@router.post("/me/nutrition-plan")
async def nutrition_plan(
    request: Request,
    body: NutritionPlanRequest | None = None,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Calculate calorie and macro goals, persisting them when applied."""
    container: AppContainer = request.app.state.container
    apply = body.apply if body is not None else False
    try:
        profile = container.profile_service.get_profile(user_id)
        plan = plan_for_profile(profile, datetime.now(tz=UTC).date())
        if apply:
            container.profile_service.set_nutrition_goals(
                user_id,
                daily_calorie_goal=plan.daily_calorie_goal,
                protein_goal=plan.protein_goal,
                carbs_goal=plan.carbs_goal,
                fat_goal=plan.fat_goal,
            )
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found"
        ) from exc
    except IncompleteProfileError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return {"success": True, "plan": plan_payload(plan, applied=apply)}
