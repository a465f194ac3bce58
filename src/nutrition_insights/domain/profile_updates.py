"""Per-field profile update variants."""

from typing import Annotated, Literal
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field, field_validator

from nutrition_insights.domain.measurements import Measurement, Unit

WEIGHT_UNITS = frozenset({Unit.KG, Unit.LB})
LENGTH_UNITS = frozenset({Unit.CM, Unit.IN})


def _require_units(measurement: Measurement, units: frozenset[Unit]) -> Measurement:
    if measurement.unit not in units:
        allowed = ", ".join(sorted(units))
        raise ValueError(f"unit must be one of: {allowed}")
    if measurement.value <= 0:
        raise ValueError("value must be positive")
    return measurement


class WeightUpdate(BaseModel):
    """Set the current body weight."""

    field: Literal["weight"]
    weight: Measurement

    @field_validator("weight")
    @classmethod
    def _check_units(cls, value: Measurement) -> Measurement:
        return _require_units(value, WEIGHT_UNITS)


class TargetWeightUpdate(BaseModel):
    """Set the goal weight."""

    field: Literal["target_weight"]
    target_weight: Measurement

    @field_validator("target_weight")
    @classmethod
    def _check_units(cls, value: Measurement) -> Measurement:
        return _require_units(value, WEIGHT_UNITS)


class HeightUpdate(BaseModel):
    """Set the body height."""

    field: Literal["height"]
    height: Measurement

    @field_validator("height")
    @classmethod
    def _check_units(cls, value: Measurement) -> Measurement:
        return _require_units(value, LENGTH_UNITS)


class CalorieGoalUpdate(BaseModel):
    """Set the daily calorie goal."""

    field: Literal["calorie_goal"]
    daily_calorie_goal: int = Field(gt=0)


class MacroGoalsUpdate(BaseModel):
    """Set daily macro goals in grams."""

    field: Literal["macro_goals"]
    protein_goal: float = Field(ge=0)
    carbs_goal: float = Field(ge=0)
    fat_goal: float = Field(ge=0)


class FitnessGoalsUpdate(BaseModel):
    """Replace the list of fitness goals."""

    field: Literal["fitness_goals"]
    fitness_goals: list[str]


class ActivityLevelUpdate(BaseModel):
    """Set the activity level."""

    field: Literal["activity_level"]
    activity_level: str = Field(min_length=1)


class DietaryPreferencesUpdate(BaseModel):
    """Replace dietary preferences."""

    field: Literal["dietary_preferences"]
    dietary_preferences: list[str]


class AllergiesUpdate(BaseModel):
    """Replace allergies."""

    field: Literal["allergies"]
    allergies: list[str]


class TimezoneUpdate(BaseModel):
    """Set the IANA timezone used for daily grouping."""

    field: Literal["timezone"]
    timezone: str

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except Exception as exc:
            raise ValueError(f"unknown timezone: {value}") from exc
        return value


ProfileUpdate = Annotated[
    WeightUpdate
    | TargetWeightUpdate
    | HeightUpdate
    | CalorieGoalUpdate
    | MacroGoalsUpdate
    | FitnessGoalsUpdate
    | ActivityLevelUpdate
    | DietaryPreferencesUpdate
    | AllergiesUpdate
    | TimezoneUpdate,
    Field(discriminator="field"),
]
