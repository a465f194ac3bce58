"""Models for LLM-generated insights."""

from pydantic import BaseModel, Field


class AIInsights(BaseModel):
    """Narrative assessment of a user's progress."""

    summary: str
    key_findings: list[str]
    concerns: list[str]
    achievements: list[str]
    action_items: list[str]
    motivational_message: str
    weekly_score: int = Field(ge=0, le=100)


class FoodRecommendation(BaseModel):
    """Single food suggestion."""

    type: str = "food"
    title: str
    description: str
    priority: str
    actionable: bool = True
    estimated_impact: str


class FoodRecommendations(BaseModel):
    """Structured output wrapper for food suggestions."""

    recommendations: list[FoodRecommendation] = Field(min_length=1, max_length=5)
