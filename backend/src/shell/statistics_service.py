"""Statistics Service - Request orchestration for the statistics surfaces.

Each request resolves the period, loads logs and the active program from the
stores, then hands off to the pure core. A store failure ends the request
with StoreError; nothing partial is returned.
"""

import logging
from datetime import date

from ..core.analytics import build_advanced_statistics
from ..core.errors import ValidationError
from ..core.models import (
    AdvancedPeriod,
    AdvancedStatistics,
    ChartPoint,
    ChartType,
    PeriodStatistics,
    StatsPeriod,
)
from ..core.reports import build_chart_series, generate_period_statistics, period_days, period_window
from .store import LogStore, ProgramStore, UserStore


logger = logging.getLogger(__name__)


def parse_stats_period(value: str) -> StatsPeriod:
    try:
        return StatsPeriod(value)
    except ValueError:
        raise ValidationError(f"Invalid period '{value}'. Use week, month or year.") from None


def parse_advanced_period(value: str) -> AdvancedPeriod:
    try:
        return AdvancedPeriod(value)
    except ValueError:
        raise ValidationError(f"Invalid period '{value}'. Use weekly, monthly or yearly.") from None


def parse_chart_type(value: str) -> ChartType:
    try:
        return ChartType(value)
    except ValueError:
        choices = ", ".join(t.value for t in ChartType)
        raise ValidationError(f"Invalid chart type '{value}'. Use one of: {choices}.") from None


class StatisticsService:
    """Read-side operations over a user's logs."""

    def __init__(self, logs: LogStore, programs: ProgramStore, users: UserStore) -> None:
        self._logs = logs
        self._programs = programs
        self._users = users

    def _load_window(self, user_id: str, period: str, today: date):
        start_date, end_date = period_window(period_days(period), today)
        logs = self._logs.find_logs(user_id, start_date, end_date)
        logger.debug("Loaded %d logs for %s (%s)", len(logs), user_id[:8], period)
        return logs

    def get_statistics(self, user_id: str, period: str = "week", today: date | None = None) -> PeriodStatistics:
        """Averages, totals, performance and plan comparison for a period.

        Args:
            user_id: The user's ID
            period: week, month or year
            today: Last day of the window (defaults to today)

        Raises:
            ValidationError: If the period is unknown
        """
        stats_period = parse_stats_period(period)
        if today is None:
            today = date.today()

        logs = self._load_window(user_id, stats_period.value, today)
        program = self._programs.find_latest_program(user_id)
        return generate_period_statistics(logs, program, stats_period, today)

    def get_advanced_statistics(
        self, user_id: str, period: str = "weekly", today: date | None = None
    ) -> AdvancedStatistics:
        """Trends, composite scores, comparisons, forecasts and insights.

        Args:
            user_id: The user's ID
            period: weekly, monthly or yearly
            today: Last day of the window (defaults to today)

        Raises:
            ValidationError: If the period is unknown
        """
        advanced_period = parse_advanced_period(period)
        if today is None:
            today = date.today()

        logs = self._load_window(user_id, advanced_period.value, today)
        program = self._programs.find_latest_program(user_id)
        user = self._users.find_user(user_id)

        stats = build_advanced_statistics(logs, program, user, advanced_period, today)
        logger.info(
            "Advanced statistics for %s: %d logs, %d trends, %d insights",
            user_id[:8], len(logs), len(stats.trends), len(stats.insights),
        )
        return stats

    def get_chart_series(
        self,
        user_id: str,
        chart_type: str,
        period: str = "week",
        today: date | None = None,
    ) -> list[ChartPoint]:
        """Points for a single chart over a period.

        Raises:
            ValidationError: If the chart type or period is unknown
        """
        parsed_type = parse_chart_type(chart_type)
        stats_period = parse_stats_period(period)
        if today is None:
            today = date.today()

        logs = self._load_window(user_id, stats_period.value, today)
        return build_chart_series(logs, parsed_type)
