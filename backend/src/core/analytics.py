"""Advanced Analytics - Pure assembly of the advanced statistics payload.

Runs every stage after the store reads: series extraction, trends, composite
scores, comparisons, forecasts, insights and chart data. Each stage tolerates
empty or short input and falls back to zero or empty defaults.
"""

from datetime import date, timedelta
from typing import Any, Optional

from .comparisons import generate_comparisons
from .composite import calculate_scores
from .forecast import TWO_WEEKS, generate_predictions
from .insights import generate_insights, generate_summary
from .models import (
    ActiveProgram,
    AdvancedPeriod,
    AdvancedStatistics,
    CompositeScores,
    DailyLog,
    Goal,
    Predictions,
    TrendResult,
    UserProfile,
)
from .reports import period_days, period_window
from .series import extract_series, sort_logs, weight_of
from .trends import ADVANCED_CONFIDENCE_SCALE, estimate_trends


def resolve_goal(program: Optional[ActiveProgram], user: Optional[UserProfile]) -> Optional[Goal]:
    """The program's goal, falling back to the profile's."""
    if program is not None:
        return program.goal
    if user is not None:
        return user.goal
    return None


def resolve_baseline_weight(program: Optional[ActiveProgram], user: Optional[UserProfile]) -> Optional[float]:
    """The program's starting weight, falling back to the profile's weight."""
    if program is not None and program.baseline_weight_kg:
        return program.baseline_weight_kg
    if user is not None:
        return user.weight_kg
    return None


def prepare_advanced_chart_data(
    logs: list[DailyLog],
    trends: list[TrendResult],
    scores: CompositeScores,
    predictions: Predictions,
) -> dict[str, Any]:
    """Chart-ready data: achievement, weight with projection, radar, trend digest."""
    achievement = [
        {
            "x": log.log_date.isoformat(),
            "y": log.program_progress.achievement_score,
            "activity_kind": log.training.activity_kind.value if log.training else "rest",
        }
        for log in logs
    ]
    weight_actual = [
        {"x": log.log_date.isoformat(), "y": weight_of(log)}
        for log in logs
        if weight_of(log)
    ]

    weight_predicted = []
    if predictions.weight_in_two_weeks is not None and weight_actual:
        last_date = logs[-1].log_date
        for offset in range(1, TWO_WEEKS + 1):
            weight_predicted.append({
                "x": (last_date + timedelta(days=offset)).isoformat(),
                "y": predictions.weight_in_two_weeks,
                "type": "prediction",
            })

    return {
        "achievement": achievement[-30:],
        "weight": {"actual": weight_actual, "predicted": weight_predicted},
        "radar": {
            "labels": ["consistency", "improvement", "adherence", "progress"],
            "data": [
                scores.consistency_score,
                scores.improvement_score,
                scores.adherence_score,
                scores.overall_progress,
            ],
        },
        "trends": [
            {"metric": t.metric.value, "direction": t.direction.value, "confidence": t.confidence}
            for t in trends
        ],
    }


def build_advanced_statistics(
    logs: list[DailyLog],
    program: Optional[ActiveProgram],
    user: Optional[UserProfile],
    period: AdvancedPeriod,
    today: date,
) -> AdvancedStatistics:
    """Compute the advanced statistics for a window of logs.

    Args:
        logs: Logs for the user (any order); logs outside the window are ignored
        program: The active program, if any
        user: The user's profile, if any
        period: Period name
        today: Last day of the window

    Returns:
        AdvancedStatistics with trends, scores, comparisons, forecasts,
        insights, chart data and summary
    """
    start_date, end_date = period_window(period_days(period.value), today)
    ordered = sort_logs([log for log in logs if start_date <= log.log_date <= end_date])
    goal = resolve_goal(program, user)

    series = extract_series(ordered)
    trends = estimate_trends(series, ADVANCED_CONFIDENCE_SCALE)
    scores = calculate_scores(ordered, program, goal)
    comparisons = generate_comparisons(ordered)
    predictions = generate_predictions(series, goal, resolve_baseline_weight(program, user), today)
    insights = generate_insights(trends, scores, comparisons, predictions, goal)

    return AdvancedStatistics(
        period=period,
        start_date=start_date,
        end_date=end_date,
        series=series,
        trends=trends,
        scores=scores,
        predictions=predictions,
        comparisons=comparisons,
        insights=insights,
        chart_data=prepare_advanced_chart_data(ordered, trends, scores, predictions),
        summary=generate_summary(trends, scores, insights),
    )
