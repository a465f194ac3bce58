"""Domain models for logged meals."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class MealRecord:
    """Summary totals for a logged meal."""

    id: UUID
    meal_name: str
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    consumed_at: datetime


@dataclass(frozen=True)
class DailyTotals:
    """Calories and macros summed over one local day."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float
