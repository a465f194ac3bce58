"""Calorie and macro intake analysis."""

from datetime import date
from zoneinfo import ZoneInfo

from nutrition_insights.domain.analytics import (
    CalorieAnalytics,
    CalorieChart,
    MacroTrend,
    MacroTrends,
)
from nutrition_insights.domain.meals import DailyTotals, MealRecord
from nutrition_insights.domain.profiles import UserProfile
from nutrition_insights.services.regression import fit_line

DEFAULT_CALORIE_GOAL = 2000
DEFAULT_PROTEIN_GOAL = 150.0
DEFAULT_CARBS_GOAL = 200.0
DEFAULT_FAT_GOAL = 65.0
ADHERENCE_TOLERANCE = 0.1
KCAL_PER_KG = 7700
CHART_DAYS = 14
MACRO_TREND_TOLERANCE = 0.05


def analyze_calories(
    meals: list[MealRecord], profile: UserProfile, timezone_name: str = "UTC"
) -> CalorieAnalytics:
    """Compute calorie adherence, projections and macro averages."""
    calorie_goal = float(profile.daily_calorie_goal or DEFAULT_CALORIE_GOAL)
    protein_goal = profile.protein_goal or DEFAULT_PROTEIN_GOAL
    carbs_goal = profile.carbs_goal or DEFAULT_CARBS_GOAL
    fat_goal = profile.fat_goal or DEFAULT_FAT_GOAL

    daily = aggregate_daily(meals, ZoneInfo(timezone_name))
    if not daily:
        return CalorieAnalytics(
            average_daily_calories=0.0,
            calorie_goal=calorie_goal,
            adherence_rate=0.0,
            calorie_deficit=0.0,
            projected_weight_loss=0.0,
            best_day="",
            worst_day="",
            chart_data=CalorieChart(),
            macro_trends=MacroTrends(
                protein=MacroTrend(average=0.0, goal=protein_goal, trend="stable"),
                carbs=MacroTrend(average=0.0, goal=carbs_goal, trend="stable"),
                fat=MacroTrend(average=0.0, goal=fat_goal, trend="stable"),
            ),
        )

    days = len(daily)
    average = sum(day.calories for day in daily) / days
    adherent = [
        day
        for day in daily
        if abs(day.calories - calorie_goal) <= calorie_goal * ADHERENCE_TOLERANCE
    ]
    by_deviation = sorted(daily, key=lambda day: abs(day.calories - calorie_goal))
    deficit = calorie_goal - average
    charted = daily[-CHART_DAYS:]

    return CalorieAnalytics(
        average_daily_calories=average,
        calorie_goal=calorie_goal,
        adherence_rate=len(adherent) / days * 100,
        calorie_deficit=deficit,
        projected_weight_loss=deficit * 7 / KCAL_PER_KG,
        best_day=by_deviation[0].day.isoformat(),
        worst_day=by_deviation[-1].day.isoformat(),
        chart_data=CalorieChart(
            labels=[day.day.isoformat() for day in charted],
            calories=[day.calories for day in charted],
            goals=[calorie_goal] * len(charted),
        ),
        macro_trends=MacroTrends(
            protein=_macro_trend([day.protein for day in daily], protein_goal),
            carbs=_macro_trend([day.carbs for day in daily], carbs_goal),
            fat=_macro_trend([day.fat for day in daily], fat_goal),
        ),
    )


def aggregate_daily(meals: list[MealRecord], tz: ZoneInfo) -> list[DailyTotals]:
    """Sum meals per local calendar day, in chronological order."""
    totals: dict[date, DailyTotals] = {}
    for meal in sorted(meals, key=lambda meal: meal.consumed_at):
        day = meal.consumed_at.astimezone(tz).date()
        current = totals.get(day) or DailyTotals(
            day=day, calories=0, protein=0, carbs=0, fat=0
        )
        totals[day] = DailyTotals(
            day=day,
            calories=current.calories + meal.total_calories,
            protein=current.protein + meal.total_protein,
            carbs=current.carbs + meal.total_carbs,
            fat=current.fat + meal.total_fat,
        )
    return list(totals.values())


def _macro_trend(values: list[float], goal: float) -> MacroTrend:
    average = sum(values) / len(values)
    fit = fit_line(values)
    trend = "stable"
    if fit is not None:
        weekly_change = fit[0] * 7
        if weekly_change > goal * MACRO_TREND_TOLERANCE:
            trend = "increasing"
        elif weekly_change < -goal * MACRO_TREND_TOLERANCE:
            trend = "decreasing"
    return MacroTrend(average=average, goal=goal, trend=trend)
