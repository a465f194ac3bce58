"""Weight trend analysis."""

from datetime import datetime, timedelta

from nutrition_insights.domain.analytics import (
    TrendDirection,
    WeightAnalytics,
    WeightChart,
)
from nutrition_insights.domain.profiles import GoalType, UserProfile
from nutrition_insights.domain.weights import WeightSample
from nutrition_insights.services.regression import trend_line

WEEKLY_WINDOW_DAYS = 7
MONTHLY_WINDOW_DAYS = 30
MAX_WEEKLY_RATE_KG = 10.0
TREND_DEAD_ZONE_KG = 0.1
MAINTENANCE_TOLERANCE = 0.05
ON_TRACK_TOLERANCE_KG = 0.3
SECONDS_PER_DAY = 86400

EXPECTED_WEEKLY_CHANGE_KG: dict[GoalType, float] = {
    GoalType.WEIGHT_LOSS: -0.5,
    GoalType.WEIGHT_GAIN: 0.5,
    GoalType.MUSCLE_GAIN: 0.25,
    GoalType.MAINTENANCE: 0.0,
}


def analyze_weight(
    samples: list[WeightSample], profile: UserProfile, now: datetime
) -> WeightAnalytics:
    """Compute weight statistics, trends and chart series."""
    if not samples:
        return _empty_analytics(profile)

    ordered = sorted(samples, key=lambda sample: sample.recorded_at)
    latest = ordered[-1].weight
    current_weight = profile.current_weight or latest
    start_weight = ordered[0].weight
    target_weight = profile.target_weight or current_weight
    goal_type = profile.goal_type

    weekly_trend = calculate_trend(ordered, WEEKLY_WINDOW_DAYS, now)
    monthly_trend = calculate_trend(ordered, MONTHLY_WINDOW_DAYS, now)
    expected_weekly = EXPECTED_WEEKLY_CHANGE_KG[goal_type]

    return WeightAnalytics(
        current_weight=current_weight,
        start_weight=start_weight,
        target_weight=target_weight,
        weight_change=current_weight - start_weight,
        weekly_trend=weekly_trend,
        monthly_trend=monthly_trend,
        progress_percentage=progress_percentage(
            goal_type, start_weight, current_weight, target_weight
        ),
        time_to_goal=time_to_goal(current_weight, target_weight, weekly_trend),
        is_on_track=abs(weekly_trend - expected_weekly) <= ON_TRACK_TOLERANCE_KG,
        trend_direction=trend_direction(goal_type, weekly_trend),
        chart_data=_build_chart(ordered, profile.current_weight),
    )


def calculate_trend(
    samples: list[WeightSample], days: int, now: datetime
) -> float:
    """Return the weekly rate of change over the last `days` days.

    Samples must be sorted by time. Spans shorter than a day yield 0 and
    the rate is clamped to +/- 10 kg per week.
    """
    cutoff = now - timedelta(days=days)
    recent = [sample for sample in samples if sample.recorded_at >= cutoff]
    if len(recent) < 2:
        return 0.0
    first, last = recent[0], recent[-1]
    span_seconds = (last.recorded_at - first.recorded_at).total_seconds()
    span_days = span_seconds / SECONDS_PER_DAY
    if span_days < 1:
        return 0.0
    weekly_rate = (last.weight - first.weight) / span_days * 7
    return max(-MAX_WEEKLY_RATE_KG, min(MAX_WEEKLY_RATE_KG, weekly_rate))


def progress_percentage(
    goal_type: GoalType,
    start_weight: float,
    current_weight: float,
    target_weight: float,
) -> float:
    """Return goal progress as a percentage in [0, 100]."""
    if goal_type is GoalType.MAINTENANCE:
        allowed_deviation = target_weight * MAINTENANCE_TOLERANCE
        if allowed_deviation <= 0:
            return 0.0
        deviation = abs(current_weight - target_weight)
        progress = 100 - deviation / allowed_deviation * 100
    else:
        total_change = abs(start_weight - target_weight)
        if total_change == 0:
            return 0.0
        if goal_type is GoalType.WEIGHT_LOSS:
            achieved = start_weight - current_weight
        else:
            achieved = current_weight - start_weight
        progress = achieved / total_change * 100
    return min(100.0, max(0.0, progress))


def trend_direction(goal_type: GoalType, weekly_trend: float) -> TrendDirection:
    """Classify the weekly trend relative to the goal."""
    if goal_type is GoalType.MAINTENANCE:
        return TrendDirection.STABLE
    sign = -1 if goal_type is GoalType.WEIGHT_LOSS else 1
    directed = weekly_trend * sign
    if directed > TREND_DEAD_ZONE_KG:
        return TrendDirection.IMPROVING
    if directed < -TREND_DEAD_ZONE_KG:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def time_to_goal(
    current_weight: float, target_weight: float, weekly_trend: float
) -> float:
    """Return weeks to reach the target at the current trend.

    A flat trend yields 0, which callers must read as unknown.
    """
    if weekly_trend == 0:
        return 0.0
    return abs((target_weight - current_weight) / weekly_trend)


def _build_chart(
    ordered: list[WeightSample], profile_weight: float | None
) -> WeightChart:
    labels = [sample.recorded_at.date().isoformat() for sample in ordered]
    weights = [sample.weight for sample in ordered]
    fitted = trend_line(weights)
    if profile_weight and profile_weight != weights[-1]:
        labels.append("Today")
        weights.append(profile_weight)
    return WeightChart(labels=labels, weights=weights, trend_line=fitted)


def _empty_analytics(profile: UserProfile) -> WeightAnalytics:
    current = profile.current_weight or 0.0
    return WeightAnalytics(
        current_weight=current,
        start_weight=current,
        target_weight=profile.target_weight or 0.0,
        weight_change=0.0,
        weekly_trend=0.0,
        monthly_trend=0.0,
        progress_percentage=0.0,
        time_to_goal=0.0,
        is_on_track=False,
        trend_direction=TrendDirection.STABLE,
        chart_data=WeightChart(),
    )
