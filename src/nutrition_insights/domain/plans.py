"""Nutrition plan models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutritionPlan:
    """Daily energy and macro targets derived from body metrics."""

    bmr: float
    tdee: int
    weekly_change_kg: float
    daily_calorie_goal: int
    protein_goal: int
    carbs_goal: int
    fat_goal: int
