"""Daily Scoring - Pure functions for the per-day achievement score.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Optional

from .models import (
    ActiveProgram,
    Deviations,
    Intensity,
    NutritionEntry,
    ProgramProgress,
    TrainingEntry,
)
from .series import is_recorded, round_half_up


TRAINING_MAX_POINTS = 30
TRAINING_TARGET_MINUTES = 60
INTENSITY_BONUS = 5
HYDRATION_MAX_POINTS = 20
WATER_TARGET_LITERS = 2.5
CALORIE_MAX_POINTS = 30
PROTEIN_MAX_POINTS = 20
MAX_SCORE = 100
ON_TRACK_THRESHOLD = 70


def _accuracy(consumed: float, target: float) -> float:
    """Closeness of consumed to target in [0, 1]."""
    return max(0.0, 1 - abs(consumed - target) / target)


def training_points(training: Optional[TrainingEntry]) -> float:
    """Points for the day's session, capped at 30, plus the intensity bonus.

    The bonus is added on top of the cap.
    """
    if training is None or not training.duration_minutes or training.duration_minutes <= 0:
        return 0.0

    points = min(TRAINING_MAX_POINTS, (training.duration_minutes / TRAINING_TARGET_MINUTES) * TRAINING_MAX_POINTS)
    if training.intensity == Intensity.HIGH:
        points += INTENSITY_BONUS
    return points


def hydration_points(nutrition: Optional[NutritionEntry]) -> float:
    if nutrition is None or not is_recorded(nutrition.water_liters):
        return 0.0
    return min(HYDRATION_MAX_POINTS, (nutrition.water_liters / WATER_TARGET_LITERS) * HYDRATION_MAX_POINTS)


def calorie_points(nutrition: Optional[NutritionEntry], program: Optional[ActiveProgram]) -> float:
    if nutrition is None or program is None:
        return 0.0
    target = program.nutrition_targets.daily_calories
    if not is_recorded(nutrition.calories_consumed) or not target:
        return 0.0
    return _accuracy(nutrition.calories_consumed, target) * CALORIE_MAX_POINTS


def protein_points(nutrition: Optional[NutritionEntry], program: Optional[ActiveProgram]) -> float:
    if nutrition is None or program is None:
        return 0.0
    target = program.nutrition_targets.protein_grams
    if not is_recorded(nutrition.protein_grams) or not target:
        return 0.0
    return _accuracy(nutrition.protein_grams, target) * PROTEIN_MAX_POINTS


def calculate_daily_score(
    training: Optional[TrainingEntry],
    nutrition: Optional[NutritionEntry],
    program: Optional[ActiveProgram],
) -> int:
    """Calculate the day's achievement score.

    Four components are summed: training (30 + 5 intensity bonus), hydration
    (20), calorie accuracy (30) and protein accuracy (20). The total is
    capped at 100 and rounded.

    Args:
        training: The day's training entry, if any
        nutrition: The day's nutrition entry, if any
        program: The user's active program, if any

    Returns:
        Integer score in [0, 100]
    """
    score = (
        training_points(training)
        + hydration_points(nutrition)
        + calorie_points(nutrition, program)
        + protein_points(nutrition, program)
    )
    return round_half_up(min(score, MAX_SCORE))


def is_on_track(score: int) -> bool:
    return score >= ON_TRACK_THRESHOLD


def calculate_deviations(
    training: Optional[TrainingEntry],
    nutrition: Optional[NutritionEntry],
    program: Optional[ActiveProgram],
) -> Deviations:
    """Calculate signed deviations from the program targets.

    Each deviation is 0 unless both the logged value and the target exist.
    Training deviation compares the session against a flat 60 minutes per
    planned training day.

    Args:
        training: The day's training entry, if any
        nutrition: The day's nutrition entry, if any
        program: The user's active program, if any

    Returns:
        Deviations (negative = under target)
    """
    deviations = Deviations()
    if program is None:
        return deviations

    targets = program.nutrition_targets
    if nutrition is not None:
        if is_recorded(nutrition.calories_consumed):
            deviations.calories = nutrition.calories_consumed - targets.daily_calories
        if is_recorded(nutrition.protein_grams):
            deviations.protein = nutrition.protein_grams - targets.protein_grams

    if training is not None and is_recorded(training.duration_minutes) and program.training_days_per_week:
        target_minutes = program.training_days_per_week * TRAINING_TARGET_MINUTES
        deviations.training_percent = (training.duration_minutes / target_minutes) * 100 - 100

    return deviations


def build_program_progress(
    training: Optional[TrainingEntry],
    nutrition: Optional[NutritionEntry],
    program: Optional[ActiveProgram],
) -> ProgramProgress:
    """Score a day and bundle the result as the log's program progress."""
    score = calculate_daily_score(training, nutrition, program)
    return ProgramProgress(
        program_id=program.id if program else None,
        is_on_track=is_on_track(score),
        deviation_from_plan=calculate_deviations(training, nutrition, program),
        achievement_score=score,
    )
