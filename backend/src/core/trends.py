"""Trend Estimation - Linear trends per metric with one-week extrapolation.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Optional

from .models import MetricSeries, MetricType, SeriesBundle, TrendDirection, TrendResult
from .regression import fit_index_series


# Confidence = |slope| * scale, capped at 100. The period statistics surface
# and the advanced statistics surface use different scales.
BASIC_CONFIDENCE_SCALE = 100
ADVANCED_CONFIDENCE_SCALE = 1000

SLOPE_THRESHOLD = 0.1
FORECAST_HORIZON = 7

METRIC_UNITS = {
    MetricType.WEIGHT: "kg",
    MetricType.CALORIES: "cal",
    MetricType.ACHIEVEMENT: "%",
    MetricType.TRAINING: "min",
    MetricType.WATER: "L",
}


def classify_slope(slope: float) -> TrendDirection:
    if slope > SLOPE_THRESHOLD:
        return TrendDirection.UP
    if slope < -SLOPE_THRESHOLD:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def estimate_trend(series: MetricSeries, confidence_scale: float) -> Optional[TrendResult]:
    """Fit one metric series.

    Args:
        series: Gap-filled metric series
        confidence_scale: Multiplier applied to |slope| for confidence

    Returns:
        TrendResult, or None when fewer than 2 points are available
    """
    values = [v for v in series.values if v is not None]
    if len(values) < 2:
        return None

    fit = fit_index_series(values)
    predicted = fit.predict(len(values) + FORECAST_HORIZON)

    return TrendResult(
        metric=series.metric,
        direction=classify_slope(fit.slope),
        slope=round(fit.slope, 3),
        r_squared=round(fit.r_squared, 3),
        confidence=min(100, abs(fit.slope) * confidence_scale),
        predicted_value=round(predicted, 2),
        unit=METRIC_UNITS[series.metric],
        current_value=values[-1],
        starting_value=values[0],
        change=round(values[-1] - values[0], 2),
    )


def estimate_trends(bundle: SeriesBundle, confidence_scale: float = ADVANCED_CONFIDENCE_SCALE) -> list[TrendResult]:
    """Estimate a trend for every metric that has at least 2 points.

    Metrics with too few points are left out rather than reported empty.
    """
    trends = []
    for series in bundle.by_metric():
        trend = estimate_trend(series, confidence_scale)
        if trend is not None:
            trends.append(trend)
    return trends


def find_trend(trends: list[TrendResult], metric: MetricType) -> Optional[TrendResult]:
    return next((t for t in trends if t.metric == metric), None)
