"""Calorie and macro target calculator."""

from datetime import date

from nutrition_insights.domain.plans import NutritionPlan
from nutrition_insights.domain.profiles import GoalType, UserProfile

KCAL_PER_KG = 7700
MIN_DAILY_CALORIES = 1200
DEFAULT_ACTIVITY_MULTIPLIER = 1.55
SIGNIFICANT_WEIGHT_GAP_KG = 0.1
TARGET_WEEKLY_CHANGE_KG = 0.5

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very active": 1.9,
    "extremely active": 1.9,
}

WEEKLY_CHANGE_BY_GOAL: dict[GoalType, float] = {
    GoalType.WEIGHT_LOSS: -0.5,
    GoalType.WEIGHT_GAIN: 0.5,
    GoalType.MUSCLE_GAIN: 0.25,
    GoalType.MAINTENANCE: 0.0,
}

# share of calories, kcal per gram
PROTEIN_SPLIT = (0.25, 4)
CARBS_SPLIT = (0.45, 4)
FAT_SPLIT = (0.25, 9)


class IncompleteProfileError(ValueError):
    """Raised when the profile lacks metrics needed for a plan."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Profile is missing: {', '.join(missing)}")
        self.missing = missing


def calculate_bmr(gender: str, age: int, height_cm: float, weight_kg: float) -> float:
    """Basal metabolic rate using the Mifflin-St Jeor equation."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if gender.lower() == "male" else base - 161


def activity_multiplier(activity_level: str | None) -> float:
    """Return the TDEE multiplier for an activity level."""
    if not activity_level:
        return DEFAULT_ACTIVITY_MULTIPLIER
    return ACTIVITY_MULTIPLIERS.get(
        activity_level.strip().lower().replace("_", " "), DEFAULT_ACTIVITY_MULTIPLIER
    )


def calculate_tdee(bmr: float, activity_level: str | None) -> int:
    """Total daily energy expenditure, rounded to whole kcal."""
    return round(bmr * activity_multiplier(activity_level))


def weekly_change_rate(
    goal_type: GoalType, weight_kg: float, target_weight_kg: float | None
) -> float:
    """Planned kg per week; a distinct target weight overrides the goal."""
    if target_weight_kg:
        gap = target_weight_kg - weight_kg
        if abs(gap) > SIGNIFICANT_WEIGHT_GAP_KG:
            return TARGET_WEEKLY_CHANGE_KG if gap > 0 else -TARGET_WEEKLY_CHANGE_KG
    return WEEKLY_CHANGE_BY_GOAL[goal_type]


def build_plan(  # noqa: PLR0913
    *,
    gender: str,
    age: int,
    height_cm: float,
    weight_kg: float,
    activity_level: str | None,
    goal_type: GoalType,
    target_weight_kg: float | None = None,
) -> NutritionPlan:
    """Compute calorie and macro goals from body metrics."""
    bmr = calculate_bmr(gender, age, height_cm, weight_kg)
    tdee = calculate_tdee(bmr, activity_level)
    rate = weekly_change_rate(goal_type, weight_kg, target_weight_kg)
    adjustment = round(rate * KCAL_PER_KG / 7)
    calories = max(MIN_DAILY_CALORIES, tdee + adjustment)
    return NutritionPlan(
        bmr=bmr,
        tdee=tdee,
        weekly_change_kg=rate,
        daily_calorie_goal=calories,
        protein_goal=_macro_grams(calories, PROTEIN_SPLIT),
        carbs_goal=_macro_grams(calories, CARBS_SPLIT),
        fat_goal=_macro_grams(calories, FAT_SPLIT),
    )


def plan_for_profile(profile: UserProfile, today: date) -> NutritionPlan:
    """Compute a plan from stored profile metrics."""
    age = profile.age_on(today)
    required = {
        "gender": profile.gender,
        "date_of_birth": age,
        "height": profile.height,
        "weight": profile.current_weight,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise IncompleteProfileError(missing)
    return build_plan(
        gender=profile.gender or "",
        age=age or 0,
        height_cm=profile.height or 0.0,
        weight_kg=profile.current_weight or 0.0,
        activity_level=profile.activity_level,
        goal_type=profile.goal_type,
        target_weight_kg=profile.target_weight,
    )


def _macro_grams(calories: int, split: tuple[float, int]) -> int:
    share, kcal_per_gram = split
    return round(calories * share / kcal_per_gram)
