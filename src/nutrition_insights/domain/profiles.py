"""User profile domain models."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from uuid import UUID


class GoalType(StrEnum):
    """Normalized goal categories used by analytics."""

    WEIGHT_LOSS = "weight_loss"
    WEIGHT_GAIN = "weight_gain"
    MUSCLE_GAIN = "muscle_gain"
    MAINTENANCE = "maintenance"


_GOAL_ALIASES: tuple[tuple[GoalType, frozenset[str]], ...] = (
    (GoalType.WEIGHT_LOSS, frozenset({"weight_loss", "lose_weight"})),
    (GoalType.WEIGHT_GAIN, frozenset({"weight_gain", "gain_weight"})),
    (
        GoalType.MUSCLE_GAIN,
        frozenset({"muscle_gain", "build_muscle", "muscle_building"}),
    ),
)


def parse_goal_type(fitness_goals: list[str] | tuple[str, ...]) -> GoalType:
    """Map free-form fitness goals to a goal type."""
    goals = set(fitness_goals)
    for goal_type, aliases in _GOAL_ALIASES:
        if goals & aliases:
            return goal_type
    return GoalType.MAINTENANCE


@dataclass(frozen=True)
class UserProfile:
    """Profile fields relevant to goals and analytics."""

    id: UUID
    first_name: str | None = None
    current_weight: float | None = None
    target_weight: float | None = None
    height: float | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    activity_level: str | None = None
    fitness_goals: tuple[str, ...] = ()
    daily_calorie_goal: int | None = None
    protein_goal: float | None = None
    carbs_goal: float | None = None
    fat_goal: float | None = None
    allergies: tuple[str, ...] = field(default_factory=tuple)
    dietary_preferences: tuple[str, ...] = field(default_factory=tuple)
    timezone: str = "UTC"

    @property
    def goal_type(self) -> GoalType:
        """Return the normalized goal type."""
        return parse_goal_type(self.fitness_goals)

    @property
    def primary_goal(self) -> str:
        """Return the first stated goal, or maintenance."""
        return self.fitness_goals[0] if self.fitness_goals else "maintenance"

    def age_on(self, day: date) -> int | None:
        """Return the age in full years on a given day."""
        if self.date_of_birth is None:
            return None
        born = self.date_of_birth
        before_birthday = (day.month, day.day) < (born.month, born.day)
        return day.year - born.year - int(before_birthday)
