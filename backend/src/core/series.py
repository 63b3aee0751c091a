"""Series Extraction - Pure functions turning daily logs into metric series.

All functions are pure: same input always produces same output, no side effects.
"""

import math
from typing import Callable, Optional, TypeVar

from .models import DailyLog, MetricPoint, MetricSeries, MetricType, SeriesBundle


T = TypeVar("T")


def is_recorded(value: Optional[float]) -> bool:
    """True when a metric was logged. A zero reading counts as not logged."""
    return value is not None and value != 0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up."""
    return int(math.floor(value + 0.5))


def weight_of(log: DailyLog) -> Optional[float]:
    return log.body_metrics.weight_kg if log.body_metrics else None


def calories_of(log: DailyLog) -> Optional[float]:
    return log.nutrition.calories_consumed if log.nutrition else None


def protein_of(log: DailyLog) -> Optional[float]:
    return log.nutrition.protein_grams if log.nutrition else None


def water_of(log: DailyLog) -> Optional[float]:
    return log.nutrition.water_liters if log.nutrition else None


def training_of(log: DailyLog) -> Optional[float]:
    return log.training.duration_minutes if log.training else None


def achievement_of(log: DailyLog) -> Optional[float]:
    return log.program_progress.achievement_score


METRIC_ACCESSORS: dict[MetricType, Callable[[DailyLog], Optional[float]]] = {
    MetricType.WEIGHT: weight_of,
    MetricType.CALORIES: calories_of,
    MetricType.ACHIEVEMENT: achievement_of,
    MetricType.TRAINING: training_of,
    MetricType.WATER: water_of,
}


def sort_logs(logs: list[DailyLog]) -> list[DailyLog]:
    """Return logs in ascending date order."""
    return sorted(logs, key=lambda log: log.log_date)


def forward_fill(values: list[Optional[T]]) -> list[Optional[T]]:
    """Replace each missing value with the previous filled one.

    A missing first value is left as is.

    Args:
        values: Sequence that may contain None

    Returns:
        New list with interior gaps filled
    """
    filled = list(values)
    for i in range(1, len(filled)):
        if filled[i] is None:
            filled[i] = filled[i - 1]
    return filled


def extract_metric(logs: list[DailyLog], metric: MetricType) -> MetricSeries:
    """Build one metric's series from ascending logs.

    Only days on which the metric was recorded contribute, so the series
    index does not line up with other metrics or with the log list.
    """
    accessor = METRIC_ACCESSORS[metric]
    dates = []
    values: list[Optional[float]] = []
    for log in logs:
        value = accessor(log)
        if is_recorded(value):
            dates.append(log.log_date)
            values.append(value)

    points = [
        MetricPoint(log_date=d, value=v)
        for d, v in zip(dates, forward_fill(values))
    ]
    return MetricSeries(metric=metric, points=points)


def extract_series(logs: list[DailyLog]) -> SeriesBundle:
    """Extract all metric series from a window of logs.

    Logs are sorted ascending by date first; callers may pass any order.

    Args:
        logs: Daily logs for the window (may be empty)

    Returns:
        SeriesBundle with every log date and one series per metric
    """
    ordered = sort_logs(logs)
    return SeriesBundle(
        dates=[log.log_date for log in ordered],
        weight=extract_metric(ordered, MetricType.WEIGHT),
        calories=extract_metric(ordered, MetricType.CALORIES),
        achievement=extract_metric(ordered, MetricType.ACHIEVEMENT),
        training=extract_metric(ordered, MetricType.TRAINING),
        water=extract_metric(ordered, MetricType.WATER),
    )
