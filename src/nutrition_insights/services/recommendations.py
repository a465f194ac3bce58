"""Food suggestions sized to what is left of today's goals."""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from nutrition_insights.domain.insights import FoodRecommendation, FoodRecommendations
from nutrition_insights.domain.meals import MealRecord
from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.services.analytics import MealRepository
from nutrition_insights.services.chat import (
    DailyIntake,
    format_nutrients,
    is_on_topic,
    todays_intake,
)
from nutrition_insights.services.insights import (
    FALLBACK_RECOMMENDATIONS,
    RECENT_MEALS_FOR_RECOMMENDATIONS,
    RECOMMENDATIONS_SCHEMA,
    InsightClient,
)
from nutrition_insights.services.profiles import ProfileService

logger = logging.getLogger(__name__)

DEFAULT_QUERY = "What should I eat?"


@dataclass(frozen=True)
class RecommendationRequest:
    """What the user asked for and which profile details to consider."""

    query: str | None = None
    meal_type: str | None = None
    time_of_day: str | None = None
    include_allergies: bool = True
    include_goals: bool = True


@dataclass
class RecommendationService:
    """Suggests foods that fit the user's remaining calories and macros."""

    profile_service: ProfileService
    meal_repository: MealRepository
    client: InsightClient | None = None
    model: str = ""

    async def recommend(
        self, user_id: UUID, request: RecommendationRequest, now: datetime
    ) -> list[FoodRecommendation]:
        """Return suggestions, or the canned ones when the LLM is unavailable."""
        profile = self.profile_service.get_profile(user_id)
        intake = todays_intake(profile, self.meal_repository, now)
        query = (request.query or "").strip() or DEFAULT_QUERY
        logger.info(
            "Food recommendation request",
            extra={
                "user_id": str(user_id),
                "meal_type": request.meal_type,
                "meal_context": intake.meal_context,
            },
        )
        if self.client is None:
            return _fallback()

        try:
            if not await is_on_topic(self.client, self.model, query):
                return [_off_topic_recommendation(profile, intake)]
            recent = self.meal_repository.list_recent_meals(
                user_id, RECENT_MEALS_FOR_RECOMMENDATIONS
            )
            prompt = build_food_request_prompt(profile, intake, recent, query, request)
            raw = await self.client.generate_json(
                model=self.model,
                prompt=prompt,
                schema=RECOMMENDATIONS_SCHEMA,
                schema_name="food_recommendations",
            )
            return FoodRecommendations.model_validate(raw).recommendations
        except Exception:
            logger.exception(
                "Food recommendation request failed", extra={"user_id": str(user_id)}
            )
            return _fallback()


def build_food_request_prompt(
    profile: UserProfile,
    intake: DailyIntake,
    recent_meals: list[MealRecord],
    query: str,
    request: RecommendationRequest,
) -> str:
    """Describe today's intake and the user's request."""
    lines = [
        "You are a nutrition expert. Suggest 3-5 specific foods or meals for:",
        f"- Current weight: {profile.current_weight or 'not set'} kg",
        f"- Target weight: {profile.target_weight or 'not set'} kg",
        f"- Dietary preferences: {', '.join(profile.dietary_preferences) or 'none'}",
    ]
    if request.include_goals:
        lines.append(f"- Goals: {', '.join(profile.fitness_goals) or 'general health'}")
    if request.include_allergies:
        lines.append(f"- Allergies: {', '.join(profile.allergies) or 'none'}")
    recent = ", ".join(meal.meal_name for meal in recent_meals if meal.meal_name)
    lines += [
        f"- Recent meals: {recent or 'none logged'}",
        "",
        f"Today ({intake.meal_context}):",
        f"- Daily goals: {format_nutrients(intake.goals)}",
        f"- Consumed: {format_nutrients(intake.consumed)}",
        f"- Remaining: {format_nutrients(intake.remaining)}",
        "",
        f'Request: "{query}"',
    ]
    if request.meal_type:
        lines.append(f"Meal type: {request.meal_type}")
    if request.time_of_day:
        lines.append(f"Time of day: {request.time_of_day}")
    lines += [
        "",
        "Fit every suggestion to the remaining calories and macros, give portion "
        "sizes, and explain how it fits the remaining daily targets.",
    ]
    return "\n".join(lines)


def _off_topic_recommendation(
    profile: UserProfile, intake: DailyIntake
) -> FoodRecommendation:
    goals = ", ".join(profile.fitness_goals) or "health"
    return FoodRecommendation(
        title="Stay On Topic!",
        description=(
            "I'm your nutrition assistant, so I can only help with food, diet, "
            "health, and fitness questions! Try asking about meals that fit your "
            f"remaining {intake.remaining.calories:.0f} calories for today, or "
            f"foods that support your {goals} goals."
        ),
        priority="high",
        estimated_impact="Keeps the conversation focused on your nutrition goals",
    )


def _fallback() -> list[FoodRecommendation]:
    return [item.model_copy() for item in FALLBACK_RECOMMENDATIONS]
