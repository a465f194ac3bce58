"""Analytics and nutrition chat endpoints."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, status

from nutrition_insights.api.auth import require_user_id
from nutrition_insights.api.models import (
    ChatRequest,
    ComprehensiveAnalyticsRequest,
    FoodRecommendationsRequest,
    InsightsRequest,
    camelize,
    report_payload,
)
from nutrition_insights.services.chat import ChatValidationError
from nutrition_insights.services.profiles import ProfileNotFoundError
from nutrition_insights.services.rate_limit import RateLimitExceededError
from nutrition_insights.services.recommendations import RecommendationRequest

if TYPE_CHECKING:
    from nutrition_insights.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.post("/comprehensive")
async def comprehensive_analytics(
    body: ComprehensiveAnalyticsRequest,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Return weight, calorie and goal analytics for a timeframe."""
    container: AppContainer = request.app.state.container
    try:
        report = await container.analytics_service.build_report(
            user_id,
            body.timeframe,
            include_ai=body.include_ai,
            include_recommendations=body.include_food_recommendations,
        )
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found"
        ) from exc
    except Exception as exc:
        logger.exception(
            "Failed to generate analytics",
            extra={"user_id": str(user_id), "timeframe": body.timeframe},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate analytics",
        ) from exc
    return {"success": True, "data": report_payload(report)}


@router.post("/ai-insights")
async def ai_insights(
    body: InsightsRequest,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Return only the narrative insights for a timeframe."""
    container: AppContainer = request.app.state.container
    try:
        insights = await container.analytics_service.build_insights(
            user_id, body.timeframe
        )
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found"
        ) from exc
    except Exception as exc:
        logger.exception(
            "Failed to generate AI insights",
            extra={"user_id": str(user_id), "timeframe": body.timeframe},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate AI insights",
        ) from exc
    return {"success": True, "aiInsights": camelize(insights.model_dump())}


@router.post("/food-recommendations")
async def food_recommendations(
    body: FoodRecommendationsRequest,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Suggest foods that fit what is left of today's goals."""
    container: AppContainer = request.app.state.container
    recommendation_request = RecommendationRequest(
        query=body.query,
        meal_type=body.meal_type,
        time_of_day=body.time_of_day,
        include_allergies=body.include_allergies,
        include_goals=body.include_goals,
    )
    try:
        recommendations = await container.recommendation_service.recommend(
            user_id, recommendation_request, datetime.now(tz=UTC)
        )
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found"
        ) from exc
    except Exception as exc:
        logger.exception(
            "Failed to get food recommendations", extra={"user_id": str(user_id)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get food recommendations",
        ) from exc
    return {
        "success": True,
        "recommendations": [camelize(item.model_dump()) for item in recommendations],
    }


@router.post("/chat")
async def nutrition_chat(
    body: ChatRequest,
    request: Request,
    user_id: UUID = Depends(require_user_id),
) -> dict[str, object]:
    """Answer a nutrition question in the context of today's intake."""
    container: AppContainer = request.app.state.container
    now = datetime.now(tz=UTC)
    try:
        reply = await container.chat_service.reply(
            user_id, body.message, body.conversation_history, now
        )
    except ChatValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except RateLimitExceededError as exc:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=exc.message
        ) from exc
    except ProfileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User profile not found"
        ) from exc
    except Exception as exc:
        logger.exception(
            "Failed to process chat message", extra={"user_id": str(user_id)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process chat message",
        ) from exc
    return {"success": True, "response": reply, "timestamp": now.isoformat()}
