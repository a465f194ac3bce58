"""Request models and camelCase response payloads."""

from dataclasses import asdict
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from nutrition_insights.domain.chat import ChatMessage
from nutrition_insights.domain.measurements import Measurement
from nutrition_insights.domain.plans import NutritionPlan
from nutrition_insights.domain.profile_updates import WEIGHT_UNITS
from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.domain.weights import WeightSample
from nutrition_insights.services.analytics import AnalyticsReport

MAX_HISTORY_MESSAGES = 50


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ComprehensiveAnalyticsRequest(_CamelModel):
    """Body of the comprehensive analytics endpoint."""

    timeframe: Literal["1W", "1M", "3M", "6M", "1Y"] = "1M"
    include_ai: bool = Field(default=True, alias="includeAI")
    include_food_recommendations: bool = True


class InsightsRequest(_CamelModel):
    """Body of the AI insights endpoint."""

    timeframe: Literal["1W", "1M", "3M", "6M", "1Y"] = "1M"


class FoodRecommendationsRequest(_CamelModel):
    """Body of the food recommendations endpoint."""

    query: str | None = Field(default=None, max_length=500)
    meal_type: str | None = None
    time_of_day: str | None = None
    include_allergies: bool = True
    include_goals: bool = True


class ChatRequest(_CamelModel):
    """Body of the chat endpoint."""

    message: str
    conversation_history: list[ChatMessage] = Field(
        default_factory=list, max_length=MAX_HISTORY_MESSAGES
    )


class WeightLogRequest(_CamelModel):
    """Body of the weight log endpoint."""

    weight: Measurement
    recorded_at: datetime | None = None

    @field_validator("weight")
    @classmethod
    def _check_units(cls, value: Measurement) -> Measurement:
        if value.unit not in WEIGHT_UNITS:
            raise ValueError("weight must be given in kg or lb")
        return value


class NutritionPlanRequest(_CamelModel):
    """Body of the nutrition plan endpoint."""

    apply: bool = False


def camelize(value: object) -> object:
    """Recursively rename dict keys from snake_case to camelCase."""
    if isinstance(value, dict):
        return {to_camel(str(key)): camelize(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [camelize(item) for item in value]
    return value


def report_payload(report: AnalyticsReport) -> dict[str, object]:
    """Serialize an analytics report for the API."""
    return {
        "weightAnalytics": camelize(asdict(report.weight_analytics)),
        "calorieAnalytics": camelize(asdict(report.calorie_analytics)),
        "goalProgress": camelize(asdict(report.goal_progress)),
        "aiInsights": (
            camelize(report.ai_insights.model_dump())
            if report.ai_insights is not None
            else None
        ),
        "recommendations": [
            camelize(item.model_dump()) for item in report.recommendations
        ],
    }


def weight_payload(sample: WeightSample) -> dict[str, object]:
    """Serialize a weight sample."""
    return {
        "id": str(sample.id),
        "weight": sample.weight,
        "recordedAt": sample.recorded_at.isoformat(),
    }


def profile_payload(profile: UserProfile) -> dict[str, object]:
    """Serialize a profile with its derived goal type."""
    payload = camelize(asdict(profile))
    payload["id"] = str(profile.id)
    payload["dateOfBirth"] = (
        profile.date_of_birth.isoformat() if profile.date_of_birth else None
    )
    payload["goalType"] = profile.goal_type.value
    return payload


def plan_payload(plan: NutritionPlan, *, applied: bool) -> dict[str, object]:
    """Serialize a nutrition plan."""
    payload = camelize(asdict(plan))
    payload["applied"] = applied
    return payload
