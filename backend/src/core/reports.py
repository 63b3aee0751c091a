"""Report Generation - Pure functions for period statistics and chart series.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date, timedelta
from typing import Any, Optional

from .insights import generate_statistical_recommendations
from .models import (
    ActiveProgram,
    ChartPoint,
    ChartType,
    DailyLog,
    PeriodAverages,
    PeriodPerformance,
    PeriodStatistics,
    PeriodTotals,
    StatsPeriod,
)
from .scoring import ON_TRACK_THRESHOLD
from .series import (
    achievement_of,
    calories_of,
    extract_series,
    protein_of,
    sort_logs,
    training_of,
    water_of,
    weight_of,
)
from .trends import BASIC_CONFIDENCE_SCALE, estimate_trends


PERIOD_DAYS = {
    "week": 7,
    "month": 30,
    "year": 365,
    "weekly": 7,
    "monthly": 30,
    "yearly": 365,
}

CALORIE_PLAN_TOLERANCE = 200
TRAINING_PLAN_RATIO = 0.8
MOMENTUM_WINDOW = 7
MOMENTUM_THRESHOLD = 5


def period_days(period: str) -> int:
    """Number of calendar days covered by a period name.

    Raises:
        KeyError: If the period is unknown
    """
    return PERIOD_DAYS[period]


def period_window(days: int, today: date) -> tuple[date, date]:
    """Inclusive (start, end) covering the last `days` calendar days."""
    return today - timedelta(days=days - 1), today


def _mean(values: list[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def _rounded_mean(logs: list[DailyLog], accessor, digits: int) -> Optional[float]:
    mean = _mean([v for v in (accessor(log) for log in logs) if v is not None])
    return round(mean, digits) if mean is not None else None


def calculate_averages(logs: list[DailyLog]) -> PeriodAverages:
    """Per-metric means over the logs that recorded each metric."""
    return PeriodAverages(
        achievement=_rounded_mean(logs, achievement_of, 1),
        calories=_rounded_mean(logs, calories_of, 0),
        water=_rounded_mean(logs, water_of, 2),
        protein=_rounded_mean(logs, protein_of, 1),
        training_duration=_rounded_mean(logs, training_of, 0),
    )


def calculate_totals(logs: list[DailyLog]) -> PeriodTotals:
    training_days = sum(1 for log in logs if (training_of(log) or 0) > 0)
    total_days = len(logs)
    frequency = (training_days / total_days) * 100 if total_days else 0.0
    return PeriodTotals(
        training_days=training_days,
        total_days=total_days,
        training_frequency=round(frequency, 1),
    )


def calculate_performance(logs: list[DailyLog]) -> PeriodPerformance:
    if not logs:
        return PeriodPerformance()

    scores = [log.program_progress.achievement_score for log in logs]
    on_track_days = sum(1 for s in scores if s >= ON_TRACK_THRESHOLD)
    return PeriodPerformance(
        best_day=max(scores),
        worst_day=min(scores),
        consistency=round((on_track_days / len(scores)) * 100, 1),
    )


def compare_with_plan(
    averages: Optional[PeriodAverages],
    totals: Optional[PeriodTotals],
    program: Optional[ActiveProgram],
) -> Optional[dict[str, Any]]:
    """Compare the period's averages against the program targets.

    Returns:
        Comparison dict, or None without a program or without logs
    """
    if program is None or averages is None or totals is None:
        return None

    calorie_target = program.nutrition_targets.daily_calories
    actual_calories = averages.calories or 0
    calorie_diff = actual_calories - calorie_target
    target_frequency = (program.training_days_per_week / 7) * 100
    achievement = averages.achievement or 0

    return {
        "calories": {
            "actual": actual_calories,
            "target": calorie_target,
            "difference": calorie_diff,
            "on_track": abs(calorie_diff) < CALORIE_PLAN_TOLERANCE,
        },
        "training": {
            "actual_frequency": totals.training_frequency,
            "target_frequency": round(target_frequency, 1),
            "on_track": totals.training_frequency >= target_frequency * TRAINING_PLAN_RATIO,
        },
        "overall": {
            "achievement": achievement,
            "target": ON_TRACK_THRESHOLD,
            "on_track": achievement >= ON_TRACK_THRESHOLD,
        },
    }


def calculate_momentum(logs: list[DailyLog]) -> dict[str, Any]:
    """Recent-week average achievement against the earlier average.

    Direction is up or down past a 5% move, otherwise stable.
    """
    if len(logs) < 2:
        return {"direction": "stable", "value": 0.0}

    scores = [log.program_progress.achievement_score for log in logs]
    recent = scores[-MOMENTUM_WINDOW:]
    older = scores[:-MOMENTUM_WINDOW]

    recent_avg = sum(recent) / len(recent)
    older_avg = sum(older) / len(older) if older else recent_avg
    change = ((recent_avg - older_avg) / older_avg) * 100 if older_avg else 0.0

    if change > MOMENTUM_THRESHOLD:
        direction = "up"
    elif change < -MOMENTUM_THRESHOLD:
        direction = "down"
    else:
        direction = "stable"
    return {"direction": direction, "value": round(change, 1)}


def prepare_chart_data(logs: list[DailyLog]) -> dict[str, Any]:
    """Chart-ready slices for the period statistics surface."""
    achievement = [
        {"date": log.log_date.isoformat(), "score": log.program_progress.achievement_score}
        for log in logs
    ]
    nutrition = [
        {
            "date": log.log_date.isoformat(),
            "calories": calories_of(log) or 0,
            "protein": protein_of(log) or 0,
            "water": water_of(log) or 0,
        }
        for log in logs
    ]
    training = [
        {
            "date": log.log_date.isoformat(),
            "duration": training_of(log) or 0,
            "activity_kind": log.training.activity_kind.value if log.training else "rest",
        }
        for log in logs
    ]
    return {
        "achievement": achievement[-10:],
        "nutrition": nutrition[-7:],
        "training": training[-14:],
        "momentum": calculate_momentum(logs),
    }


def generate_period_statistics(
    logs: list[DailyLog],
    program: Optional[ActiveProgram],
    period: StatsPeriod,
    today: date,
) -> PeriodStatistics:
    """Generate the period statistics payload.

    Args:
        logs: Logs inside the period window (any order, may be empty)
        program: The active program, if any
        period: Period name
        today: Last day of the window

    Returns:
        PeriodStatistics; aggregate sections are None when no logs exist
    """
    days = period_days(period.value)
    start_date, end_date = period_window(days, today)
    ordered = sort_logs([log for log in logs if start_date <= log.log_date <= end_date])

    stats = PeriodStatistics(
        period=period,
        days=days,
        start_date=start_date,
        end_date=end_date,
        chart_data=prepare_chart_data(ordered),
        trends=estimate_trends(extract_series(ordered), BASIC_CONFIDENCE_SCALE),
    )
    if not ordered:
        return stats

    stats.averages = calculate_averages(ordered)
    stats.totals = calculate_totals(ordered)
    stats.performance = calculate_performance(ordered)
    stats.comparison_with_plan = compare_with_plan(stats.averages, stats.totals, program)
    stats.recommendations = generate_statistical_recommendations(
        stats.averages, stats.totals, stats.performance, program, period.value
    )
    return stats


def build_chart_series(logs: list[DailyLog], chart_type: ChartType) -> list[ChartPoint]:
    """Points for a single chart, ascending by date.

    Missing values plot as 0, except weight which only plots weighed days.
    """
    ordered = sort_logs(logs)

    if chart_type == ChartType.ACHIEVEMENT:
        return [ChartPoint(x=log.log_date, y=achievement_of(log)) for log in ordered]
    if chart_type == ChartType.CALORIES:
        return [
            ChartPoint(x=log.log_date, y=calories_of(log) or 0, extras={"protein": protein_of(log) or 0})
            for log in ordered
        ]
    if chart_type == ChartType.WATER:
        return [ChartPoint(x=log.log_date, y=water_of(log) or 0) for log in ordered]
    if chart_type == ChartType.TRAINING:
        return [
            ChartPoint(
                x=log.log_date,
                y=training_of(log) or 0,
                extras={"activity_kind": log.training.activity_kind.value if log.training else None},
            )
            for log in ordered
        ]
    return [ChartPoint(x=log.log_date, y=weight_of(log)) for log in ordered if weight_of(log) is not None]
