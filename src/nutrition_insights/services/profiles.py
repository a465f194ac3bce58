"""Profile lookup, caching and updates."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.measurements import Unit, convert
from nutrition_insights.domain.profile_updates import (
    ActivityLevelUpdate,
    AllergiesUpdate,
    CalorieGoalUpdate,
    DietaryPreferencesUpdate,
    FitnessGoalsUpdate,
    HeightUpdate,
    MacroGoalsUpdate,
    ProfileUpdate,
    TargetWeightUpdate,
    TimezoneUpdate,
    WeightUpdate,
)
from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.services.cache import Cache

logger = logging.getLogger(__name__)

PROFILE_CACHE_TTL_SECONDS = 300


class ProfileNotFoundError(LookupError):
    """Raised when a user has no stored profile."""


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user, if present."""

    def update_profile(
        self, user_id: UUID, changes: dict[str, object]
    ) -> UserProfile | None:
        """Apply column changes and return the updated profile."""


_UPDATE_HANDLERS: dict[type, Callable[..., dict[str, object]]] = {
    WeightUpdate: lambda update: {
        "current_weight": convert(update.weight, Unit.KG).value
    },
    TargetWeightUpdate: lambda update: {
        "target_weight": convert(update.target_weight, Unit.KG).value
    },
    HeightUpdate: lambda update: {"height": convert(update.height, Unit.CM).value},
    CalorieGoalUpdate: lambda update: {
        "daily_calorie_goal": update.daily_calorie_goal
    },
    MacroGoalsUpdate: lambda update: {
        "protein_goal": update.protein_goal,
        "carbs_goal": update.carbs_goal,
        "fat_goal": update.fat_goal,
    },
    FitnessGoalsUpdate: lambda update: {"fitness_goals": list(update.fitness_goals)},
    ActivityLevelUpdate: lambda update: {"activity_level": update.activity_level},
    DietaryPreferencesUpdate: lambda update: {
        "dietary_preferences": list(update.dietary_preferences)
    },
    AllergiesUpdate: lambda update: {"allergies": list(update.allergies)},
    TimezoneUpdate: lambda update: {"timezone": update.timezone},
}


def update_to_changes(update: ProfileUpdate) -> dict[str, object]:
    """Translate an update variant into stored column values."""
    handler = _UPDATE_HANDLERS.get(type(update))
    if handler is None:
        raise TypeError(f"Unsupported profile update: {type(update).__name__}")
    return handler(update)


@dataclass
class ProfileService:
    """Application service for reading and editing profiles."""

    repository: ProfileRepository
    cache: Cache
    ttl_seconds: int = PROFILE_CACHE_TTL_SECONDS

    def get_profile(self, user_id: UUID) -> UserProfile:
        """Return the profile, served from cache when fresh."""
        key = _cache_key(user_id)
        cached = self.cache.get(key)
        if isinstance(cached, UserProfile):
            return cached
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(str(user_id))
        self.cache.set(key, profile, self.ttl_seconds)
        return profile

    def apply_update(self, user_id: UUID, update: ProfileUpdate) -> UserProfile:
        """Apply a single-field update."""
        return self._write(user_id, update_to_changes(update))

    def set_current_weight(self, user_id: UUID, weight_kg: float) -> UserProfile:
        """Store the latest logged weight on the profile."""
        return self._write(user_id, {"current_weight": weight_kg})

    def set_nutrition_goals(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        daily_calorie_goal: int,
        protein_goal: float,
        carbs_goal: float,
        fat_goal: float,
    ) -> UserProfile:
        """Persist calorie and macro goals."""
        return self._write(
            user_id,
            {
                "daily_calorie_goal": daily_calorie_goal,
                "protein_goal": protein_goal,
                "carbs_goal": carbs_goal,
                "fat_goal": fat_goal,
            },
        )

    def invalidate(self, user_id: UUID) -> None:
        """Drop any cached profile for the user."""
        self.cache.delete(_cache_key(user_id))

    def _write(self, user_id: UUID, changes: dict[str, object]) -> UserProfile:
        self.invalidate(user_id)
        profile = self.repository.update_profile(user_id, changes)
        if profile is None:
            self.invalidate(user_id)
            raise ProfileNotFoundError(str(user_id))
        # reads during the update may have cached the old row
        self.cache.set(_cache_key(user_id), profile, self.ttl_seconds)
        logger.info(
            "Profile updated",
            extra={"user_id": str(user_id), "fields": sorted(changes)},
        )
        return profile


def _cache_key(user_id: UUID) -> str:
    return f"profile:{user_id}"
