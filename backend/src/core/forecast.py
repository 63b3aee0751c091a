"""Forecasting - Weight predictions and goal-date estimates.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date, timedelta
from typing import Optional

from .models import Goal, Predictions, SeriesBundle
from .regression import fit_index_series
from .series import round_half_up


TWO_WEEKS = 14
MIN_POINTS_TWO_WEEK = 3
MIN_POINTS_GOAL_DATE = 5
GOAL_WEIGHT_RATIO = 0.9
LOSING_TREND_FACTOR = 70
GAINING_TREND_FACTOR = 30


def average_daily_change(values: list[float]) -> float:
    """Mean of successive differences; 0 for fewer than 2 values."""
    if len(values) < 2:
        return 0.0
    total = sum(b - a for a, b in zip(values, values[1:]))
    return total / (len(values) - 1)


def population_variance(values: list[float]) -> float:
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def success_probability(weights: list[float], avg_daily_change: float) -> int:
    """Chance of reaching the weight goal, in percent.

    Average of a steadiness factor (100 - variance * 10, floored at 0) and a
    trend factor (70 when losing, 30 otherwise).
    """
    if len(weights) < 3:
        return 50

    consistency_factor = max(0.0, 100 - population_variance(weights) * 10)
    trend_factor = LOSING_TREND_FACTOR if avg_daily_change < 0 else GAINING_TREND_FACTOR
    return round_half_up((consistency_factor + trend_factor) / 2)


def estimate_goal_date(
    current_weight: float, target_weight: float, avg_daily_change: float, today: date
) -> Optional[date]:
    """Date the target weight is reached at the current daily rate.

    Returns None when a near-zero rate puts the date outside the calendar.
    """
    try:
        days_to_goal = round_half_up((current_weight - target_weight) / abs(avg_daily_change))
        return today + timedelta(days=days_to_goal)
    except OverflowError:
        return None


def generate_predictions(
    bundle: SeriesBundle,
    goal: Optional[Goal],
    baseline_weight: Optional[float],
    today: date,
) -> Predictions:
    """Project the weight series forward.

    Args:
        bundle: Extracted series for the window
        goal: The user's goal
        baseline_weight: Body weight the 10% loss target is measured from
        today: Reference date for the estimated goal date

    Returns:
        Predictions; fields stay None when their prerequisites are missing
    """
    predictions = Predictions()
    weights = [v for v in bundle.weight.values if v is not None]

    if len(weights) >= MIN_POINTS_TWO_WEEK:
        fit = fit_index_series(weights)
        predictions.weight_in_two_weeks = round(fit.predict(len(weights) + TWO_WEEKS), 1)

    if len(weights) >= MIN_POINTS_GOAL_DATE and goal == Goal.WEIGHT_LOSS and baseline_weight:
        current_weight = weights[-1]
        target_weight = baseline_weight * GOAL_WEIGHT_RATIO
        avg_change = average_daily_change(weights)

        if avg_change < 0:
            predictions.estimated_goal_date = estimate_goal_date(current_weight, target_weight, avg_change, today)
            if predictions.estimated_goal_date is not None:
                predictions.probability_of_success = success_probability(weights, avg_change)

    return predictions
