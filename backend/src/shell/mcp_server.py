"""MCP Server - Tool definitions for Claude integration.

Defines all MCP tools that Claude can invoke for fitness logging and
progress analytics. Handles authentication via API key in Authorization header.
"""

import logging
import os
from contextvars import ContextVar
from datetime import date

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import FitLogrError, StoreError
from ..core.models import (
    BodyMetrics,
    Goal,
    NutritionEntry,
    NutritionTargets,
    TrainingEntry,
)
from .auth import AuthClient
from .daily_log_service import DailyLogService
from .firestore_client import FitLogFirestoreClient, FirestoreConfig
from .statistics_service import StatisticsService
from .store import InMemoryStore


logger = logging.getLogger(__name__)

# Context variable to store current user_id per request
current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)

# Configure transport security for Cloud Run deployment
transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=[
        "localhost:*",
        "127.0.0.1:*",
        "*.run.app:*",
        "*.run.app",
    ],
)

# Initialize FastMCP server with stateless HTTP for cloud deployments
mcp = FastMCP(
    "fitlogr",
    instructions="""FitLogr - Personal fitness coaching assistant.

Use these tools to help users log their training, nutrition and body metrics
each day and to review their progress over time.

On first use, call setup_profile and then set_program to record the user's
goal and daily targets. Logging the same day twice replaces the earlier log.
Insights and recommendations come back as structured codes; explain them to
the user in plain language.""",
    stateless_http=True,
    transport_security=transport_security,
)

# Lazy-initialized store and clients
_store: FitLogFirestoreClient | InMemoryStore | None = None
_auth_client: AuthClient | None = None


def get_store() -> FitLogFirestoreClient | InMemoryStore:
    """Get or create the configured store.

    FITLOGR_STORE selects the adapter: "firestore" or "memory" (default).
    """
    global _store
    if _store is None:
        backend = os.environ.get("FITLOGR_STORE", "memory")
        if backend == "firestore":
            config = FirestoreConfig(
                project_id=os.environ.get("GOOGLE_CLOUD_PROJECT"),
                database=os.environ.get("FIRESTORE_DATABASE", "fitlogr"),
            )
            _store = FitLogFirestoreClient(config)
        else:
            _store = InMemoryStore()
        logger.info("Using %s store", backend)
    return _store


def reset_store() -> None:
    """Drop the cached store and auth client so the next call rebuilds them."""
    global _store, _auth_client
    _store = None
    _auth_client = None


def get_auth_client() -> AuthClient:
    """Get or create Auth client."""
    global _auth_client
    if _auth_client is None:
        _auth_client = AuthClient(get_store())
    return _auth_client


def tool_error(error: Exception) -> dict:
    """Error payload for a tool call. Store failures get a generic message."""
    if isinstance(error, StoreError):
        logger.error("Store failure: %s", str(error))
        return {"error": "Server error."}
    return {"error": str(error)}


def get_daily_log_service() -> DailyLogService:
    store = get_store()
    return DailyLogService(store, store, store)


def get_statistics_service() -> StatisticsService:
    store = get_store()
    return StatisticsService(store, store, store)


def get_user_id() -> str:
    """Get current authenticated user ID.

    Raises:
        RuntimeError: If no user is authenticated
    """
    user_id = current_user_id.get()
    if user_id is None:
        raise RuntimeError("No authenticated user. Ensure API key is provided.")
    return user_id


def _parse_date(date_str: str | None) -> date | None:
    if date_str is None:
        return None
    return date.fromisoformat(date_str)


# ==================== Profile Tools ====================


@mcp.tool()
def setup_profile(email: str, goal: str, weight_kg: float | None = None) -> dict:
    """Record the user's goal and current body weight.

    Args:
        email: User's email address
        goal: One of weight_loss, muscle_gain, maintenance, endurance
        weight_kg: Current body weight in kg (optional)

    Returns:
        The stored profile
    """
    user_id = get_user_id()
    try:
        profile = get_daily_log_service().setup_profile(user_id, email, Goal(goal), weight_kg)
    except (ValueError, FitLogrError) as e:
        return tool_error(e)
    return profile.model_dump(mode="json", exclude={"user_id"})


@mcp.tool()
def set_program(
    goal: str,
    training_days_per_week: int,
    daily_calories: float,
    protein_grams: float,
    carbs_grams: float = 0,
    fats_grams: float = 0,
    baseline_weight_kg: float | None = None,
) -> dict:
    """Set the user's active program targets.

    The newest program is always the active one.

    Args:
        goal: One of weight_loss, muscle_gain, maintenance, endurance
        training_days_per_week: Planned sessions per week (1-7)
        daily_calories: Daily calorie target
        protein_grams: Daily protein target in grams
        carbs_grams: Daily carbohydrate target in grams
        fats_grams: Daily fat target in grams
        baseline_weight_kg: Starting weight (defaults to profile weight)

    Returns:
        The stored program
    """
    user_id = get_user_id()
    try:
        targets = NutritionTargets(
            daily_calories=daily_calories,
            protein_grams=protein_grams,
            carbs_grams=carbs_grams,
            fats_grams=fats_grams,
        )
        program = get_daily_log_service().set_program(
            user_id, Goal(goal), training_days_per_week, targets, baseline_weight_kg
        )
    except (ValueError, FitLogrError) as e:
        return tool_error(e)
    return program.model_dump(mode="json", exclude={"user_id"})


# ==================== Logging Tools ====================


@mcp.tool()
def log_day(
    activity_kind: str | None = None,
    duration_minutes: float | None = None,
    intensity: str | None = None,
    calories_burned: float | None = None,
    calories_consumed: float | None = None,
    protein_grams: float | None = None,
    carbs_grams: float | None = None,
    fats_grams: float | None = None,
    water_liters: float | None = None,
    weight_kg: float | None = None,
    sleep_hours: float | None = None,
    mood: str | None = None,
    stress_level: int | None = None,
    energy_level: int | None = None,
) -> dict:
    """Log today's training, nutrition and body metrics.

    Every field is optional; logging again today replaces today's log.

    Args:
        activity_kind: cardio, strength, hiit, yoga, rest or other
        duration_minutes: Training duration (0-300)
        intensity: low, moderate, high or extreme
        calories_burned: Calories burned in training
        calories_consumed: Calories eaten today
        protein_grams: Protein eaten today
        carbs_grams: Carbohydrates eaten today
        fats_grams: Fat eaten today
        water_liters: Water drunk today (0-10)
        weight_kg: Body weight (30-200)
        sleep_hours: Hours slept
        mood: excellent, good, average, bad or terrible
        stress_level: 1-10
        energy_level: 1-10

    Returns:
        Achievement score, on-track flag, deviations and recommendations
    """
    user_id = get_user_id()

    try:
        training = None
        if any(v is not None for v in (activity_kind, duration_minutes, intensity)):
            training = TrainingEntry(
                activity_kind=activity_kind or "other",
                duration_minutes=duration_minutes,
                intensity=intensity,
                calories_burned=calories_burned,
            )
        nutrition = None
        if any(v is not None for v in (calories_consumed, protein_grams, carbs_grams, fats_grams, water_liters)):
            nutrition = NutritionEntry(
                calories_consumed=calories_consumed,
                protein_grams=protein_grams,
                carbs_grams=carbs_grams,
                fats_grams=fats_grams,
                water_liters=water_liters,
            )
        body_metrics = None
        if any(v is not None for v in (weight_kg, sleep_hours, mood, stress_level, energy_level)):
            body_metrics = BodyMetrics(
                weight_kg=weight_kg,
                sleep_hours=sleep_hours,
                mood=mood,
                stress_level=stress_level,
                energy_level=energy_level,
            )
    except PydanticValidationError as e:
        return {"error": f"Invalid entry: {e.errors()[0]['msg']}"}

    try:
        result = get_daily_log_service().record_daily_log(user_id, training, nutrition, body_metrics)
    except FitLogrError as e:
        return tool_error(e)

    return {
        "date": result.log.log_date.isoformat(),
        "achievement_score": result.achievement_score,
        "is_on_track": result.is_on_track,
        "deviation_from_plan": result.log.program_progress.deviation_from_plan.model_dump(),
        "recommendations": [r.model_dump() for r in result.recommendations],
    }


@mcp.tool()
def list_logs(start_date: str | None = None, end_date: str | None = None, limit: int = 30) -> dict:
    """List the user's most recent daily logs.

    Args:
        start_date: Earliest date in YYYY-MM-DD format (optional)
        end_date: Latest date in YYYY-MM-DD format (optional)
        limit: Maximum number of logs to return

    Returns:
        Logs newest first and their count
    """
    user_id = get_user_id()
    try:
        logs = get_daily_log_service().list_daily_logs(
            user_id, _parse_date(start_date), _parse_date(end_date), limit
        )
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}
    except FitLogrError as e:
        return tool_error(e)

    return {
        "logs": [log.model_dump(mode="json", exclude={"user_id"}) for log in logs],
        "count": len(logs),
    }


# ==================== Statistics Tools ====================


@mcp.tool()
def get_statistics(period: str = "week") -> dict:
    """Averages, totals, performance and plan comparison for a period.

    Args:
        period: week, month or year

    Returns:
        Period statistics with recommendations and chart data
    """
    user_id = get_user_id()
    try:
        stats = get_statistics_service().get_statistics(user_id, period)
    except FitLogrError as e:
        return tool_error(e)
    return stats.model_dump(mode="json")


@mcp.tool()
def get_advanced_statistics(period: str = "weekly") -> dict:
    """Trends, composite scores, comparisons, forecasts and insights.

    Args:
        period: weekly, monthly or yearly

    Returns:
        Advanced statistics including a headline summary
    """
    user_id = get_user_id()
    try:
        stats = get_statistics_service().get_advanced_statistics(user_id, period)
    except FitLogrError as e:
        return tool_error(e)
    return stats.model_dump(mode="json", exclude={"series"})


@mcp.tool()
def get_chart_series(chart_type: str, period: str = "week") -> dict:
    """Data points for one chart.

    Args:
        chart_type: achievement, calories, water, training or weight
        period: week, month or year

    Returns:
        Chart points ascending by date
    """
    user_id = get_user_id()
    try:
        points = get_statistics_service().get_chart_series(user_id, chart_type, period)
    except FitLogrError as e:
        return tool_error(e)
    return {
        "chart_type": chart_type,
        "period": period,
        "points": [p.model_dump(mode="json") for p in points],
    }
