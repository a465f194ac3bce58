"""Weight log endpoints."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from nutrition_insights.api.auth import require_user_id
from nutrition_insights.api.models import WeightLogRequest, weight_payload
from nutrition_insights.services.profiles import ProfileNotFoundError
from nutrition_insights.services.weights import (
    InvalidWeightError,
    WeightEntryNotFoundError,
)

if TYPE_CHECKING:
    from nutrition_insights.containers import AppContainer

MAX_HISTORY_LIMIT = 1000

router = APIRouter(prefix="/api/weights", tags=["weights"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def log_weight(
    body: WeightLogRequest,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Record a weight and update the profile's current weight."""
    container: AppContainer = request.app.state.container
    try:
        sample = container.weight_service.log_weight(
            user_id, body.weight, body.recorded_at
        )
    except InvalidWeightError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found"
        ) from exc
    return {"success": True, "weightRecord": weight_payload(sample)}


@router.get("")
async def weight_history(
    request: Request,
    user_id: UUID = Depends(require_user_id),
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int | None = Query(default=None, ge=1, le=MAX_HISTORY_LIMIT),
) -> dict[str, object]:
    """Return the user's weight history, oldest first."""
    container: AppContainer = request.app.state.container
    samples = container.weight_service.history(user_id, start, end, limit)
    return {
        "success": True,
        "weightHistory": [weight_payload(sample) for sample in samples],
    }


@router.delete("/{entry_id}")
async def delete_weight(
    entry_id: UUID,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Delete one of the user's weight entries."""
    container: AppContainer = request.app.state.container
    try:
        container.weight_service.delete_entry(user_id, entry_id)
    except WeightEntryNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Weight entry not found"
        ) from exc
    return {"success": True}
