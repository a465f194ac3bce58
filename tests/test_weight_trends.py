"""Tests for weight trend analysis."""

from datetime import timedelta
from uuid import uuid4

import pytest

from nutrition_insights.domain.analytics import TrendDirection
from nutrition_insights.domain.profiles import GoalType
from nutrition_insights.services.weight_trends import (
    analyze_weight,
    calculate_trend,
    progress_percentage,
    time_to_goal,
    trend_direction,
)
from tests.conftest import NOW, make_profile, sample


def test_empty_samples_return_neutral_result() -> None:
    profile = make_profile(uuid4(), current_weight=82.0, target_weight=75.0)

    analytics = analyze_weight([], profile, NOW)

    assert analytics.current_weight == 82.0
    assert analytics.start_weight == 82.0
    assert analytics.progress_percentage == 0
    assert analytics.weekly_trend == 0
    assert analytics.trend_direction is TrendDirection.STABLE
    assert analytics.chart_data.labels == []
    assert analytics.chart_data.weights == []
    assert analytics.chart_data.trend_line == []


def test_two_week_loss_scenario() -> None:
    profile = make_profile(uuid4(), current_weight=78.0, target_weight=70.0)
    samples = [
        sample(80.0, NOW - timedelta(days=14)),
        sample(78.0, NOW),
    ]

    analytics = analyze_weight(samples, profile, NOW)

    assert analytics.progress_percentage == pytest.approx(20.0)
    assert analytics.monthly_trend == pytest.approx(-1.0)
    # only the latest sample falls inside the weekly window
    assert analytics.weekly_trend == 0
    assert analytics.weight_change == pytest.approx(-2.0)
    assert analytics.start_weight == 80.0


def test_weekly_trend_drives_direction_and_time_to_goal() -> None:
    profile = make_profile(uuid4(), current_weight=79.0, target_weight=75.0)
    samples = [
        sample(80.0, NOW - timedelta(days=7)),
        sample(79.5, NOW - timedelta(days=3)),
        sample(79.0, NOW),
    ]

    analytics = analyze_weight(samples, profile, NOW)

    assert analytics.weekly_trend == pytest.approx(-1.0)
    assert analytics.trend_direction is TrendDirection.IMPROVING
    assert analytics.time_to_goal == pytest.approx(4.0)
    assert analytics.is_on_track is False


def test_on_track_when_close_to_expected_rate() -> None:
    profile = make_profile(uuid4(), current_weight=79.6, target_weight=75.0)
    samples = [
        sample(80.0, NOW - timedelta(days=7)),
        sample(79.6, NOW),
    ]

    analytics = analyze_weight(samples, profile, NOW)

    assert analytics.weekly_trend == pytest.approx(-0.4)
    assert analytics.is_on_track is True


def test_trend_is_clamped_for_sparse_data() -> None:
    samples = [
        sample(100.0, NOW - timedelta(days=2)),
        sample(50.0, NOW),
    ]

    assert calculate_trend(samples, 7, NOW) == -10.0


def test_samples_an_hour_apart_do_not_produce_extreme_trend() -> None:
    samples = [
        sample(50.0, NOW - timedelta(hours=1)),
        sample(100.0, NOW),
    ]

    trend = calculate_trend(samples, 7, NOW)

    assert -10.0 <= trend <= 10.0


def test_trend_needs_two_samples_in_window() -> None:
    samples = [sample(80.0, NOW - timedelta(days=40)), sample(79.0, NOW)]

    assert calculate_trend(samples, 30, NOW) == 0.0


@pytest.mark.parametrize(
    ("goal_type", "start", "current", "target"),
    [
        (GoalType.WEIGHT_LOSS, 80.0, 90.0, 70.0),
        (GoalType.WEIGHT_LOSS, 80.0, 60.0, 70.0),
        (GoalType.WEIGHT_GAIN, 60.0, 50.0, 70.0),
        (GoalType.MUSCLE_GAIN, 60.0, 90.0, 70.0),
        (GoalType.MAINTENANCE, 70.0, 95.0, 70.0),
        (GoalType.WEIGHT_LOSS, 70.0, 70.0, 70.0),
    ],
)
def test_progress_percentage_is_bounded(
    goal_type: GoalType, start: float, current: float, target: float
) -> None:
    progress = progress_percentage(goal_type, start, current, target)

    assert 0.0 <= progress <= 100.0


def test_progress_is_zero_when_start_equals_target() -> None:
    assert progress_percentage(GoalType.WEIGHT_GAIN, 70.0, 72.0, 70.0) == 0.0


def test_maintenance_at_target_gets_full_credit() -> None:
    assert progress_percentage(GoalType.MAINTENANCE, 70.0, 70.0, 70.0) == 100.0


def test_maintenance_degrades_outside_band() -> None:
    # 5% of 70 kg is 3.5 kg, so 1.75 kg off target is half credit
    progress = progress_percentage(GoalType.MAINTENANCE, 70.0, 71.75, 70.0)

    assert progress == pytest.approx(50.0)


@pytest.mark.parametrize("goal", ["lose_weight", "gain_weight"])
def test_reaching_target_on_schedule_is_full_progress(goal: str) -> None:
    start, target = (80.0, 75.0) if goal == "lose_weight" else (60.0, 65.0)
    step = (target - start) / 5
    samples = [
        sample(start + step * index, NOW - timedelta(days=5 - index))
        for index in range(6)
    ]
    profile = make_profile(
        uuid4(), current_weight=None, target_weight=target, fitness_goals=(goal,)
    )

    analytics = analyze_weight(samples, profile, NOW)

    assert analytics.current_weight == pytest.approx(target)
    assert analytics.progress_percentage == pytest.approx(100.0)


def test_trend_direction_mirrors_for_gain_goals() -> None:
    assert trend_direction(GoalType.WEIGHT_LOSS, -0.5) is TrendDirection.IMPROVING
    assert trend_direction(GoalType.WEIGHT_LOSS, 0.5) is TrendDirection.DECLINING
    assert trend_direction(GoalType.WEIGHT_GAIN, 0.5) is TrendDirection.IMPROVING
    assert trend_direction(GoalType.MUSCLE_GAIN, -0.5) is TrendDirection.DECLINING
    assert trend_direction(GoalType.WEIGHT_LOSS, 0.05) is TrendDirection.STABLE
    assert trend_direction(GoalType.MAINTENANCE, -2.0) is TrendDirection.STABLE


def test_time_to_goal_is_zero_for_flat_trend() -> None:
    assert time_to_goal(80.0, 70.0, 0.0) == 0.0
    assert time_to_goal(80.0, 70.0, -0.5) == pytest.approx(20.0)


def test_chart_appends_profile_weight_as_today() -> None:
    profile = make_profile(uuid4(), current_weight=78.5)
    samples = [
        sample(80.0, NOW - timedelta(days=2)),
        sample(79.0, NOW - timedelta(days=1)),
    ]

    chart = analyze_weight(samples, profile, NOW).chart_data

    assert chart.labels[-1] == "Today"
    assert chart.weights == [80.0, 79.0, 78.5]
    assert chart.trend_line == pytest.approx([80.0, 79.0])


def test_chart_skips_today_when_profile_matches_last_sample() -> None:
    profile = make_profile(uuid4(), current_weight=79.0)
    samples = [
        sample(79.0, NOW - timedelta(days=1)),
        sample(80.0, NOW - timedelta(days=2)),
    ]

    chart = analyze_weight(samples, profile, NOW).chart_data

    assert chart.labels == [
        (NOW - timedelta(days=2)).date().isoformat(),
        (NOW - timedelta(days=1)).date().isoformat(),
    ]
    assert chart.weights == [80.0, 79.0]
