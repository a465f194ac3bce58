"""Derived analytics structures."""

from dataclasses import dataclass, field
from enum import StrEnum

from nutrition_insights.domain.profiles import GoalType


class TrendDirection(StrEnum):
    """Direction of the weight trend relative to the goal."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class ProgressStatus(StrEnum):
    """Goal progress classification."""

    EXCELLENT = "excellent"
    GOOD = "good"
    CONCERNING = "concerning"
    OFF_TRACK = "off_track"


@dataclass(frozen=True)
class WeightChart:
    """Weight chart series."""

    labels: list[str] = field(default_factory=list)
    weights: list[float] = field(default_factory=list)
    trend_line: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class WeightAnalytics:
    """Weight statistics for a timeframe."""

    current_weight: float
    start_weight: float
    target_weight: float
    weight_change: float
    weekly_trend: float
    monthly_trend: float
    progress_percentage: float
    time_to_goal: float
    is_on_track: bool
    trend_direction: TrendDirection
    chart_data: WeightChart


@dataclass(frozen=True)
class CalorieChart:
    """Daily calorie chart series."""

    labels: list[str] = field(default_factory=list)
    calories: list[float] = field(default_factory=list)
    goals: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class MacroTrend:
    """Average intake of a macro against its goal."""

    average: float
    goal: float
    trend: str


@dataclass(frozen=True)
class MacroTrends:
    """Macro trends for protein, carbs and fat."""

    protein: MacroTrend
    carbs: MacroTrend
    fat: MacroTrend


@dataclass(frozen=True)
class CalorieAnalytics:
    """Calorie intake statistics for a timeframe."""

    average_daily_calories: float
    calorie_goal: float
    adherence_rate: float
    calorie_deficit: float
    projected_weight_loss: float
    best_day: str
    worst_day: str
    chart_data: CalorieChart
    macro_trends: MacroTrends


@dataclass(frozen=True)
class GoalProgress:
    """Progress toward the user's primary goal."""

    primary_goal: str
    goal_type: GoalType
    expected_progress: float
    actual_progress: float
    variance: float
    status: ProgressStatus
    days_to_goal: float
    success_probability: float
