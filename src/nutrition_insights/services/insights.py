"""LLM-backed narrative insights and food recommendations."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nutrition_insights.domain.analytics import (
    CalorieAnalytics,
    GoalProgress,
    WeightAnalytics,
)
from nutrition_insights.domain.insights import (
    AIInsights,
    FoodRecommendation,
    FoodRecommendations,
)
from nutrition_insights.domain.meals import MealRecord
from nutrition_insights.domain.profiles import UserProfile

logger = logging.getLogger(__name__)

RECENT_MEALS_FOR_RECOMMENDATIONS = 10

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

INSIGHTS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "key_findings": _STRING_LIST,
        "concerns": _STRING_LIST,
        "achievements": _STRING_LIST,
        "action_items": _STRING_LIST,
        "motivational_message": {"type": "string"},
        "weekly_score": {"type": "integer", "minimum": 0, "maximum": 100},
    },
    "required": [
        "summary",
        "key_findings",
        "concerns",
        "achievements",
        "action_items",
        "motivational_message",
        "weekly_score",
    ],
    "additionalProperties": False,
}

RECOMMENDATIONS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "recommendations": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": ["food"]},
                    "title": {"type": "string"},
                    "description": {"type": "string"},
                    "priority": {"type": "string", "enum": ["high", "medium", "low"]},
                    "actionable": {"type": "boolean"},
                    "estimated_impact": {"type": "string"},
                },
                "required": [
                    "type",
                    "title",
                    "description",
                    "priority",
                    "actionable",
                    "estimated_impact",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["recommendations"],
    "additionalProperties": False,
}

FALLBACK_INSIGHTS = AIInsights(
    summary="Your progress is being tracked. Keep up the good work!",
    key_findings=["Weight trend is being monitored", "Calorie intake is recorded"],
    concerns=[],
    achievements=["Consistent tracking"],
    action_items=["Continue logging meals", "Monitor weight regularly"],
    motivational_message="Every step counts towards your goals!",
    weekly_score=75,
)

FALLBACK_RECOMMENDATIONS = [
    FoodRecommendation(
        title="Lean Protein",
        description="Include chicken, fish, or tofu in your meals",
        priority="high",
        estimated_impact="Supports muscle maintenance and satiety",
    )
]


class InsightClient(Protocol):
    """Interface for LLM text generation."""

    async def generate_json(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        """Return structured output matching the schema."""

    async def generate_text(
        self,
        *,
        model: str,
        instructions: str,
        messages: list[dict[str, str]],
    ) -> str:
        """Return a free-text reply to a conversation."""


@dataclass
class InsightService:
    """Builds prompts from analytics and degrades to canned content."""

    client: InsightClient
    model: str

    async def generate_insights(
        self,
        profile: UserProfile,
        weight: WeightAnalytics,
        calories: CalorieAnalytics,
        progress: GoalProgress,
    ) -> AIInsights:
        """Return a narrative assessment, or the fallback on any failure."""
        prompt = build_insights_prompt(profile, weight, calories, progress)
        try:
            raw = await self.client.generate_json(
                model=self.model,
                prompt=prompt,
                schema=INSIGHTS_SCHEMA,
                schema_name="progress_insights",
            )
            return AIInsights.model_validate(raw)
        except Exception:
            logger.exception(
                "AI insight generation failed", extra={"user_id": str(profile.id)}
            )
            return FALLBACK_INSIGHTS.model_copy(deep=True)

    async def recommend_foods(
        self, profile: UserProfile, recent_meals: list[MealRecord]
    ) -> list[FoodRecommendation]:
        """Return food suggestions, or the fallback on any failure."""
        prompt = build_recommendations_prompt(profile, recent_meals)
        try:
            raw = await self.client.generate_json(
                model=self.model,
                prompt=prompt,
                schema=RECOMMENDATIONS_SCHEMA,
                schema_name="food_recommendations",
            )
            return FoodRecommendations.model_validate(raw).recommendations
        except Exception:
            logger.exception(
                "Food recommendation generation failed",
                extra={"user_id": str(profile.id)},
            )
            return [item.model_copy() for item in FALLBACK_RECOMMENDATIONS]


def build_insights_prompt(
    profile: UserProfile,
    weight: WeightAnalytics,
    calories: CalorieAnalytics,
    progress: GoalProgress,
) -> str:
    """Summarize the analytics for the insight prompt."""
    lines = [
        "Analyze this user's fitness progress and provide personalized insights.",
        "",
        "User profile:",
        f"- Goals: {_join(profile.fitness_goals, 'Not specified')}",
        f"- Target weight: {_kg(profile.target_weight)}",
        f"- Allergies: {_join(profile.allergies, 'None')}",
        f"- Dietary preferences: {_join(profile.dietary_preferences, 'None')}",
        "",
        "Weight progress:",
        f"- Current weight: {weight.current_weight:.1f} kg",
        f"- Weight change: {weight.weight_change:+.1f} kg",
        f"- Weekly trend: {weight.weekly_trend:+.2f} kg/week",
        f"- Progress: {weight.progress_percentage:.0f}%",
        f"- Trend direction: {weight.trend_direction}",
        "",
        "Calorie data:",
        f"- Average daily calories: {calories.average_daily_calories:.0f}",
        f"- Calorie goal: {calories.calorie_goal:.0f}",
        f"- Adherence rate: {calories.adherence_rate:.0f}%",
        f"- Calorie deficit: {calories.calorie_deficit:.0f}",
        "",
        "Goal progress:",
        f"- Status: {progress.status}",
        f"- Success probability: {progress.success_probability:.0f}%",
        "",
        "Give a 2-3 sentence summary, 3-4 key findings, any concerning patterns, "
        "achievements to celebrate, 3-4 specific action items, an encouraging "
        "message and a weekly score from 0 to 100.",
    ]
    return "\n".join(lines)


def build_recommendations_prompt(
    profile: UserProfile, recent_meals: list[MealRecord]
) -> str:
    """Describe the user for the food recommendation prompt."""
    recent = recent_meals[-RECENT_MEALS_FOR_RECOMMENDATIONS:]
    recent_names = ", ".join(meal.meal_name for meal in recent if meal.meal_name)
    lines = [
        "Generate 3-5 personalized food recommendations for a user with:",
        f"- Goals: {_join(profile.fitness_goals, 'general health')}",
        f"- Allergies: {_join(profile.allergies, 'none')}",
        f"- Dietary preferences: {_join(profile.dietary_preferences, 'none')}",
        f"- Recent meals: {recent_names or 'none logged'}",
        "",
        "Explain why each food suits their goals and its expected impact.",
    ]
    return "\n".join(lines)


def _join(values: tuple[str, ...], default: str) -> str:
    return ", ".join(values) if values else default


def _kg(value: float | None) -> str:
    return f"{value:.1f} kg" if value else "not set"
