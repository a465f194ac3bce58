"""Goal progress synthesis from weight and calorie analytics."""

from nutrition_insights.domain.analytics import (
    CalorieAnalytics,
    GoalProgress,
    ProgressStatus,
    WeightAnalytics,
)
from nutrition_insights.domain.profiles import GoalType, UserProfile

EXPECTED_MONTHLY_CHANGE_KG: dict[GoalType, float] = {
    GoalType.WEIGHT_LOSS: -2.0,
    GoalType.WEIGHT_GAIN: 2.0,
    GoalType.MUSCLE_GAIN: 2.0,
    GoalType.MAINTENANCE: 0.0,
}

_STATUS_THRESHOLDS: tuple[tuple[float, ProgressStatus], ...] = (
    (0.5, ProgressStatus.EXCELLENT),
    (1.0, ProgressStatus.GOOD),
    (2.0, ProgressStatus.CONCERNING),
)

ACTIVE_TREND_KG = 0.1
ACTIVE_TREND_FACTOR = 1.2
FLAT_TREND_FACTOR = 0.8


def analyze_goal_progress(
    profile: UserProfile,
    weight: WeightAnalytics,
    calories: CalorieAnalytics,  # noqa: ARG001
) -> GoalProgress:
    """Compare actual weight change with the expected monthly change."""
    goal_type = profile.goal_type
    expected = EXPECTED_MONTHLY_CHANGE_KG[goal_type]
    actual = weight.weight_change
    variance = abs(actual - expected)
    return GoalProgress(
        primary_goal=profile.primary_goal,
        goal_type=goal_type,
        expected_progress=expected,
        actual_progress=actual,
        variance=variance,
        status=classify_status(variance),
        days_to_goal=weight.time_to_goal * 7,
        success_probability=success_probability(
            actual, expected, weight.weekly_trend
        ),
    )


def classify_status(variance: float) -> ProgressStatus:
    """Map the progress variance to a status."""
    for threshold, status in _STATUS_THRESHOLDS:
        if variance <= threshold:
            return status
    return ProgressStatus.OFF_TRACK


def success_probability(actual: float, expected: float, weekly_trend: float) -> float:
    """Heuristic chance of reaching the goal, in [0, 100].

    A zero expectation (maintenance) counts as a ratio of 1.
    """
    ratio = actual / expected if expected != 0 else 1.0
    active = abs(weekly_trend) > ACTIVE_TREND_KG
    trend_factor = ACTIVE_TREND_FACTOR if active else FLAT_TREND_FACTOR
    return max(0.0, min(100.0, ratio * 50 * trend_factor))
