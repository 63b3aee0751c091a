"""Insights and Recommendations - Rule-based reactions to computed numbers.

All functions are pure: same input always produces same output, no side effects.
Insights are structured records; clients render them.
"""

from typing import Optional

from .comparisons import find_comparison
from .models import (
    ActiveProgram,
    AnalyticsSummary,
    Comparison,
    CompositeScores,
    DailyLog,
    Goal,
    Insight,
    InsightCategory,
    MetricType,
    PeriodAverages,
    PeriodPerformance,
    PeriodTotals,
    Predictions,
    Recommendation,
    TrendDirection,
    TrendResult,
)
from .scoring import ON_TRACK_THRESHOLD
from .trends import find_trend


HIGH_CONSISTENCY = 80
LOW_CONSISTENCY = 50
HIGH_ADHERENCE = 75
CALORIE_SHIFT_PERCENT = 10
CONFIDENT_PREDICTION = 70


# ==================== Advanced Insights ====================


def _weight_insights(trends: list[TrendResult], goal: Optional[Goal]) -> list[Insight]:
    weight_trend = find_trend(trends, MetricType.WEIGHT)
    if weight_trend is None:
        return []

    if weight_trend.direction == TrendDirection.DOWN and goal == Goal.WEIGHT_LOSS:
        return [Insight(
            kind="weight_loss_on_track",
            category=InsightCategory.SUCCESS,
            confidence=85,
            data={"lost_kg": round(abs(weight_trend.change), 1)},
        )]
    if weight_trend.direction == TrendDirection.UP and goal == Goal.MUSCLE_GAIN:
        return [Insight(
            kind="muscle_gain_on_track",
            category=InsightCategory.SUCCESS,
            confidence=85,
            data={"gained_kg": round(weight_trend.change, 1)},
        )]
    return []


def _consistency_insights(scores: CompositeScores) -> list[Insight]:
    if scores.consistency_score >= HIGH_CONSISTENCY:
        return [Insight(
            kind="consistency_high",
            category=InsightCategory.SUCCESS,
            confidence=90,
            data={"consistency_score": scores.consistency_score},
        )]
    if scores.consistency_score <= LOW_CONSISTENCY:
        return [Insight(
            kind="consistency_low",
            category=InsightCategory.WARNING,
            confidence=75,
            data={"consistency_score": scores.consistency_score},
        )]
    return []


def _adherence_insights(scores: CompositeScores) -> list[Insight]:
    if scores.adherence_score >= HIGH_ADHERENCE:
        return [Insight(
            kind="adherence_high",
            category=InsightCategory.SUCCESS,
            confidence=80,
            data={"adherence_score": scores.adherence_score},
        )]
    return []


def _calorie_insights(comparisons: list[Comparison]) -> list[Insight]:
    calories = find_comparison(comparisons, "calories_consumed")
    if calories is None or abs(calories.percentage_change) <= CALORIE_SHIFT_PERCENT:
        return []

    return [Insight(
        kind="calorie_intake_shift",
        category=InsightCategory.SUCCESS if calories.is_improvement else InsightCategory.WARNING,
        confidence=70,
        data={
            "direction": "increased" if calories.percentage_change > 0 else "decreased",
            "percentage_change": abs(calories.percentage_change),
        },
    )]


def _prediction_insights(predictions: Predictions) -> list[Insight]:
    probability = predictions.probability_of_success
    if probability is None or probability <= CONFIDENT_PREDICTION:
        return []

    return [Insight(
        kind="goal_on_schedule",
        category=InsightCategory.PREDICTION,
        confidence=probability,
        data={
            "probability_of_success": probability,
            "estimated_goal_date": (
                predictions.estimated_goal_date.isoformat() if predictions.estimated_goal_date else None
            ),
        },
    )]


def generate_insights(
    trends: list[TrendResult],
    scores: CompositeScores,
    comparisons: list[Comparison],
    predictions: Predictions,
    goal: Optional[Goal],
) -> list[Insight]:
    """Evaluate every insight rule in a fixed order.

    Order: weight trend against goal, consistency, adherence, calorie shift,
    goal prediction. Rules are independent; several may fire together.

    Args:
        trends: Trend results for the window
        scores: Composite scores for the window
        comparisons: Half-window comparisons
        predictions: Forecast output
        goal: The user's goal

    Returns:
        Insights in rule order (may be empty)
    """
    return (
        _weight_insights(trends, goal)
        + _consistency_insights(scores)
        + _adherence_insights(scores)
        + _calorie_insights(comparisons)
        + _prediction_insights(predictions)
    )


def _is_positive_trend(trend: TrendResult) -> bool:
    if trend.metric == MetricType.WEIGHT:
        return trend.direction == TrendDirection.DOWN
    return trend.direction == TrendDirection.UP


def progress_status(overall_progress: int) -> str:
    if overall_progress < 40:
        return "needs_improvement"
    if overall_progress < 70:
        return "good"
    if overall_progress < 90:
        return "very_good"
    return "excellent"


def summary_recommendation(scores: CompositeScores, trends: list[TrendResult]) -> str:
    if scores.consistency_score < 60:
        return "build_routine"
    weight_trend = find_trend(trends, MetricType.WEIGHT)
    if weight_trend is not None and weight_trend.direction == TrendDirection.UP:
        return "check_calorie_intake"
    return "keep_going"


def generate_summary(
    trends: list[TrendResult],
    scores: CompositeScores,
    insights: list[Insight],
) -> AnalyticsSummary:
    """Condense trends, scores and insights into a headline summary."""
    positive = sum(1 for t in trends if _is_positive_trend(t))
    positive_share = (positive / len(trends)) * 100 if trends else 0.0

    return AnalyticsSummary(
        status=progress_status(scores.overall_progress),
        overall_progress=scores.overall_progress,
        positive_trends=round(positive_share, 1),
        key_insight=insights[0].kind if insights else "keep_tracking",
        recommendation=summary_recommendation(scores, trends),
    )


# ==================== Daily Recommendations ====================


def generate_daily_recommendations(
    log: DailyLog,
    program: Optional[ActiveProgram],
    goal: Optional[Goal] = None,
) -> list[Recommendation]:
    """Recommendations returned right after a day is logged.

    Args:
        log: The saved log with its program progress filled in
        program: The active program, if any
        goal: Goal override; defaults to the program's goal

    Returns:
        Recommendations (may be empty)
    """
    recommendations = []
    score = log.program_progress.achievement_score
    nutrition = log.nutrition
    training = log.training
    if goal is None and program is not None:
        goal = program.goal

    if score < ON_TRACK_THRESHOLD:
        recommendations.append(Recommendation(
            code="below_daily_target",
            category="warning",
            message="You are below your daily target. Try to do better tomorrow.",
        ))
        if nutrition is not None and nutrition.water_liters is not None and nutrition.water_liters < 2:
            recommendations.append(Recommendation(
                code="drink_more_water",
                category="hydration",
                message="Drink more water. Aim for 2 to 3 liters a day.",
            ))
        if training is not None and training.duration_minutes is not None and training.duration_minutes < 30:
            recommendations.append(Recommendation(
                code="train_longer",
                category="training",
                message="Try to reach at least 30 minutes of physical activity.",
            ))
    elif score >= 85:
        recommendations.append(Recommendation(
            code="great_day",
            category="success",
            message="Excellent work, you are on track.",
        ))

    if program is None or nutrition is None:
        return recommendations

    targets = program.nutrition_targets
    if (
        goal == Goal.WEIGHT_LOSS
        and nutrition.calories_consumed is not None
        and nutrition.calories_consumed > targets.daily_calories
    ):
        recommendations.append(Recommendation(
            code="stay_under_calories",
            category="nutrition",
            message="For weight loss, try to stay under your calorie target.",
        ))
    if (
        goal == Goal.MUSCLE_GAIN
        and nutrition.protein_grams is not None
        and nutrition.protein_grams < targets.protein_grams
    ):
        recommendations.append(Recommendation(
            code="more_protein",
            category="nutrition",
            message="Increase your protein intake to support muscle gain.",
        ))

    return recommendations


# ==================== Period Recommendations ====================


def generate_statistical_recommendations(
    averages: Optional[PeriodAverages],
    totals: Optional[PeriodTotals],
    performance: Optional[PeriodPerformance],
    program: Optional[ActiveProgram],
    period: str,
) -> list[Recommendation]:
    """Recommendations for the period statistics surface.

    Returns an empty list when the period has no logs.
    """
    if averages is None or totals is None or performance is None:
        return []

    recommendations = []
    if performance.consistency < 70:
        recommendations.append(Recommendation(
            code="improve_consistency",
            category="warning",
            message=f"You were on track {performance.consistency}% of the {period}.",
            action="Plan your sessions in advance.",
        ))

    if totals.training_frequency < 50:
        recommendations.append(Recommendation(
            code="train_more_often",
            category="training",
            message=f"You trained {totals.training_days} of {totals.total_days} days.",
            action="Aim for at least 3 sessions a week.",
        ))

    if program is not None and averages.calories is not None:
        target = program.nutrition_targets.daily_calories
        calorie_diff = averages.calories - target
        if abs(calorie_diff) > 200:
            over = calorie_diff > 0
            recommendations.append(Recommendation(
                code="adjust_calories",
                category="nutrition",
                message=(
                    f"Your average intake is {'above' if over else 'below'} "
                    f"your target of {target:g} calories."
                ),
                action="Reduce portions slightly." if over else "Add a healthy snack.",
            ))

    return recommendations
