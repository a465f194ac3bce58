"""Comprehensive progress analytics."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.analytics import (
    CalorieAnalytics,
    GoalProgress,
    WeightAnalytics,
)
from nutrition_insights.domain.insights import AIInsights, FoodRecommendation
from nutrition_insights.domain.meals import MealRecord
from nutrition_insights.services.calorie_stats import analyze_calories
from nutrition_insights.services.goal_progress import analyze_goal_progress
from nutrition_insights.services.insights import FALLBACK_INSIGHTS, InsightService
from nutrition_insights.services.profiles import ProfileService
from nutrition_insights.services.weight_trends import analyze_weight
from nutrition_insights.services.weights import WeightRepository

logger = logging.getLogger(__name__)

TIMEFRAME_DAYS: dict[str, int] = {
    "1W": 7,
    "1M": 30,
    "3M": 90,
    "6M": 180,
    "1Y": 365,
}


class MealRepository(Protocol):
    """Persistence interface for logged meals."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals consumed in the range, oldest first."""

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        """Return the user's latest meals across all time, oldest first."""


@dataclass(frozen=True)
class AnalyticsReport:
    """Combined analytics for one request."""

    weight_analytics: WeightAnalytics
    calorie_analytics: CalorieAnalytics
    goal_progress: GoalProgress
    ai_insights: AIInsights | None = None
    recommendations: list[FoodRecommendation] = field(default_factory=list)


def timeframe_window(timeframe: str, now: datetime) -> tuple[datetime, datetime]:
    """Return the (start, end) lookback window for a timeframe code."""
    try:
        days = TIMEFRAME_DAYS[timeframe]
    except KeyError as exc:
        raise ValueError(f"Unknown timeframe: {timeframe}") from exc
    return now - timedelta(days=days), now


@dataclass
class AnalyticsService:
    """Runs weight, calorie and goal analysis over a user's history."""

    profile_service: ProfileService
    weight_repository: WeightRepository
    meal_repository: MealRepository
    insight_service: InsightService | None = None

    async def build_report(  # noqa: PLR0913
        self,
        user_id: UUID,
        timeframe: str = "1M",
        *,
        include_ai: bool = True,
        include_recommendations: bool = True,
        now: datetime | None = None,
    ) -> AnalyticsReport:
        """Compute the full report for the timeframe."""
        reference = now or datetime.now(tz=UTC)
        start, end = timeframe_window(timeframe, reference)
        profile = self.profile_service.get_profile(user_id)
        samples = self.weight_repository.list_samples(user_id, start, end)
        meals = self.meal_repository.list_meals(user_id, start, end)
        logger.info(
            "Building analytics",
            extra={
                "user_id": str(user_id),
                "timeframe": timeframe,
                "weight_samples": len(samples),
                "meals": len(meals),
            },
        )

        weight = analyze_weight(samples, profile, reference)
        calories = analyze_calories(meals, profile, profile.timezone)
        progress = analyze_goal_progress(profile, weight, calories)

        ai_insights = None
        recommendations: list[FoodRecommendation] = []
        if self.insight_service is not None:
            if include_ai:
                ai_insights = await self.insight_service.generate_insights(
                    profile, weight, calories, progress
                )
            if include_recommendations:
                recommendations = await self.insight_service.recommend_foods(
                    profile, meals
                )

        return AnalyticsReport(
            weight_analytics=weight,
            calorie_analytics=calories,
            goal_progress=progress,
            ai_insights=ai_insights,
            recommendations=recommendations,
        )

    async def build_insights(
        self,
        user_id: UUID,
        timeframe: str = "1M",
        *,
        now: datetime | None = None,
    ) -> AIInsights:
        """Return only the narrative insights for the timeframe."""
        report = await self.build_report(
            user_id,
            timeframe,
            include_ai=True,
            include_recommendations=False,
            now=now,
        )
        if report.ai_insights is None:
            return FALLBACK_INSIGHTS.model_copy(deep=True)
        return report.ai_insights
