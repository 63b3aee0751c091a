"""Shared builders for daily logs and programs."""

from datetime import date, timedelta

import pytest

from src.core.models import (
    ActiveProgram,
    BodyMetrics,
    DailyLog,
    Goal,
    Intensity,
    NutritionEntry,
    NutritionTargets,
    ProgramProgress,
    TrainingEntry,
)


START = date(2024, 12, 1)


def _make_log(
    day: int = 0,
    *,
    duration: float | None = None,
    intensity: Intensity | None = None,
    calories: float | None = None,
    protein: float | None = None,
    water: float | None = None,
    weight: float | None = None,
    score: int = 0,
    user_id: str = "user-1",
) -> DailyLog:
    """Build a log `day` days after START with only the given fields set."""
    training = None
    if duration is not None or intensity is not None:
        training = TrainingEntry(activity_kind="strength", duration_minutes=duration, intensity=intensity)

    nutrition = None
    if calories is not None or protein is not None or water is not None:
        nutrition = NutritionEntry(calories_consumed=calories, protein_grams=protein, water_liters=water)

    body_metrics = BodyMetrics(weight_kg=weight) if weight is not None else None

    return DailyLog(
        user_id=user_id,
        log_date=START + timedelta(days=day),
        training=training,
        nutrition=nutrition,
        body_metrics=body_metrics,
        program_progress=ProgramProgress(achievement_score=score, is_on_track=score >= 70),
    )


def _make_program(
    goal: Goal = Goal.MAINTENANCE,
    daily_calories: float = 2000,
    protein_grams: float = 150,
    training_days_per_week: int = 4,
    baseline_weight_kg: float | None = None,
    user_id: str = "user-1",
) -> ActiveProgram:
    return ActiveProgram(
        user_id=user_id,
        goal=goal,
        training_days_per_week=training_days_per_week,
        nutrition_targets=NutritionTargets(daily_calories=daily_calories, protein_grams=protein_grams),
        baseline_weight_kg=baseline_weight_kg,
    )


@pytest.fixture
def make_log():
    """Factory for daily logs."""
    return _make_log


@pytest.fixture
def make_program():
    """Factory for programs."""
    return _make_program


@pytest.fixture
def program() -> ActiveProgram:
    """Maintenance program: 2000 cal, 150g protein, 4 days a week."""
    return _make_program()
