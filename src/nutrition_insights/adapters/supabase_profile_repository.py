"""Supabase-backed profile repository."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.services.profiles import ProfileRepository

PROFILE_COLUMNS = (
    "id, first_name, weight, target_weight, height, date_of_birth, gender, "
    "activity_level, fitness_goals, daily_calorie_goal, protein_goal, "
    "carbs_goal, fat_goal, allergies, dietary_preferences, timezone"
)

# profile field name -> users table column
_COLUMN_NAMES = {"current_weight": "weight"}


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile row for a user."""
        response = (
            self.client.table("users")
            .select(PROFILE_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def update_profile(
        self, user_id: UUID, changes: dict[str, object]
    ) -> UserProfile | None:
        """Update profile columns and return the fresh row."""
        payload = {
            _COLUMN_NAMES.get(name, name): value for name, value in changes.items()
        }
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("users").update(payload).eq("id", str(user_id)).execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> UserProfile:
    birth_raw = row.get("date_of_birth")
    return UserProfile(
        id=UUID(str(row["id"])),
        first_name=row.get("first_name"),
        current_weight=_optional_float(row.get("weight")),
        target_weight=_optional_float(row.get("target_weight")),
        height=_optional_float(row.get("height")),
        date_of_birth=(
            date.fromisoformat(str(birth_raw)[:10]) if birth_raw else None
        ),
        gender=row.get("gender"),
        activity_level=row.get("activity_level"),
        fitness_goals=tuple(row.get("fitness_goals") or ()),
        daily_calorie_goal=(
            int(row["daily_calorie_goal"])
            if row.get("daily_calorie_goal") is not None
            else None
        ),
        protein_goal=_optional_float(row.get("protein_goal")),
        carbs_goal=_optional_float(row.get("carbs_goal")),
        fat_goal=_optional_float(row.get("fat_goal")),
        allergies=tuple(row.get("allergies") or ()),
        dietary_preferences=tuple(row.get("dietary_preferences") or ()),
        timezone=str(row.get("timezone") or "UTC"),
    )


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None
