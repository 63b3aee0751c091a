"""Half-Window Comparisons - Pure functions comparing two halves of a window.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Callable, Optional

from .models import Comparison, DailyLog
from .series import achievement_of, calories_of, training_of, water_of


CALORIE_STABILITY_PERCENT = 10

COMPARED_METRICS: dict[str, Callable[[DailyLog], Optional[float]]] = {
    "achievement_score": achievement_of,
    "calories_consumed": calories_of,
    "training_duration": training_of,
    "water": water_of,
}


def calculate_average(logs: list[DailyLog], accessor: Callable[[DailyLog], Optional[float]]) -> Optional[float]:
    """Mean over logs that have the value. Zeros count, absent values do not.

    Returns:
        The mean, or None if no log has the value
    """
    values = [v for v in (accessor(log) for log in logs) if v is not None]
    if not values:
        return None
    return sum(values) / len(values)


def is_improvement(metric: str, percentage_change: float) -> bool:
    """Calories improve by staying stable; everything else by going up."""
    if metric == "calories_consumed":
        return abs(percentage_change) < CALORIE_STABILITY_PERCENT
    return percentage_change > 0


def generate_comparisons(logs: list[DailyLog]) -> list[Comparison]:
    """Compare the second half of a window against the first half.

    The split is at floor(n / 2). A metric is compared only when both halves
    have it and the first-half mean is nonzero.

    Args:
        logs: Daily logs in ascending date order

    Returns:
        One Comparison per comparable metric (empty for fewer than 2 logs)
    """
    if len(logs) < 2:
        return []

    half = len(logs) // 2
    first_half, second_half = logs[:half], logs[half:]

    comparisons = []
    for metric, accessor in COMPARED_METRICS.items():
        previous = calculate_average(first_half, accessor)
        current = calculate_average(second_half, accessor)
        if previous is None or current is None or previous == 0:
            continue

        percentage_change = ((current - previous) / previous) * 100
        comparisons.append(Comparison(
            metric=metric,
            current=current,
            previous=previous,
            percentage_change=round(percentage_change, 1),
            is_improvement=is_improvement(metric, percentage_change),
        ))

    return comparisons


def find_comparison(comparisons: list[Comparison], metric: str) -> Optional[Comparison]:
    return next((c for c in comparisons if c.metric == metric), None)
