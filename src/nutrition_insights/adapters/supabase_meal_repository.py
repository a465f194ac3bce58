"""Supabase repository for meal entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.meals import MealRecord
from nutrition_insights.services.analytics import MealRepository

MEAL_COLUMNS = (
    "id, meal_name, total_calories, total_protein, total_carbs, total_fat, "
    "consumed_at"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal queries."""

    client: Client

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals consumed in the time range."""
        response = (
            self.client.table("meal_entries")
            .select(MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("consumed_at", start.isoformat())
            .lte("consumed_at", end.isoformat())
            .order("consumed_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[MealRecord]:
        """Return the latest meals, oldest first."""
        response = (
            self.client.table("meal_entries")
            .select(MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .order("consumed_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in reversed(response.data or [])]


def _parse_row(row: dict[str, object]) -> MealRecord:
    return MealRecord(
        id=UUID(str(row["id"])),
        meal_name=str(row.get("meal_name") or ""),
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
        consumed_at=datetime.fromisoformat(str(row["consumed_at"])),
    )
