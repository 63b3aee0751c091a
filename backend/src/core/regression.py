"""Least Squares - Simple linear regression shared by trends and forecasts.

All functions are pure: same input always produces same output, no side effects.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RegressionFit:
    """A fitted line y = slope * x + intercept."""

    slope: float
    intercept: float
    r_squared: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


def linear_regression(x: list[float], y: list[float]) -> RegressionFit:
    """Fit ordinary least squares to paired samples.

    Degenerate inputs do not raise: with no spread in x the line is flat at
    the mean of y, and with no spread in y R-squared is 0.

    Args:
        x: Independent values
        y: Dependent values, same length as x

    Returns:
        RegressionFit with slope, intercept and R-squared

    Raises:
        ValueError: If x and y differ in length or are empty
    """
    n = len(x)
    if n != len(y):
        raise ValueError("x and y must have the same length")
    if n == 0:
        raise ValueError("Need at least 1 data point for regression")

    x_mean = sum(x) / n
    y_mean = sum(y) / n

    numerator = sum((xi - x_mean) * (yi - y_mean) for xi, yi in zip(x, y))
    denominator = sum((xi - x_mean) ** 2 for xi in x)

    if denominator == 0:
        return RegressionFit(slope=0.0, intercept=y_mean, r_squared=0.0)

    slope = numerator / denominator
    intercept = y_mean - slope * x_mean

    ss_tot = sum((yi - y_mean) ** 2 for yi in y)
    if ss_tot == 0:
        return RegressionFit(slope=slope, intercept=intercept, r_squared=0.0)

    ss_res = sum((yi - (slope * xi + intercept)) ** 2 for xi, yi in zip(x, y))
    return RegressionFit(slope=slope, intercept=intercept, r_squared=1 - ss_res / ss_tot)


def fit_index_series(values: list[float]) -> RegressionFit:
    """Fit a series against its index 0..n-1, ignoring calendar spacing."""
    return linear_regression([float(i) for i in range(len(values))], values)
