"""Composite Scores - Consistency, improvement, adherence and overall progress.

All functions are pure: same input always produces same output, no side effects.
Logs are expected in ascending date order.
"""

from typing import Optional

from .models import ActiveProgram, CompositeScores, DailyLog, Goal
from .series import (
    achievement_of,
    calories_of,
    is_recorded,
    round_half_up,
    training_of,
    weight_of,
)


TRAINING_CONSISTENCY_MINUTES = 20
CALORIE_CONSISTENCY_DELTA = 300
CALORIE_ADHERENCE_DELTA = 200
MIN_ADHERENT_SESSION_MINUTES = 30
WEIGHT_LOSS_MULTIPLIER = 10


def _both_recorded(a: Optional[float], b: Optional[float]) -> bool:
    return is_recorded(a) and is_recorded(b)


def calculate_consistency_score(logs: list[DailyLog]) -> float:
    """Share of day-to-day checks where training and calories stayed stable.

    Each consecutive pair allows two checks: training duration moved by less
    than 20 minutes, calories moved by less than 300. The denominator is
    always 2 * (n - 1), so pairs missing a metric count against the score.
    """
    if len(logs) < 2:
        return 0.0

    consistent = 0
    for prev, curr in zip(logs, logs[1:]):
        prev_training, curr_training = training_of(prev), training_of(curr)
        if _both_recorded(prev_training, curr_training):
            if abs(prev_training - curr_training) < TRAINING_CONSISTENCY_MINUTES:
                consistent += 1

        prev_calories, curr_calories = calories_of(prev), calories_of(curr)
        if _both_recorded(prev_calories, curr_calories):
            if abs(prev_calories - curr_calories) < CALORIE_CONSISTENCY_DELTA:
                consistent += 1

    max_possible = (len(logs) - 1) * 2
    return (consistent / max_possible) * 100 if max_possible > 0 else 0.0


def calculate_improvement_score(logs: list[DailyLog]) -> float:
    """Share of comparable day-to-day pairs where the later day did better.

    Achievement score and training duration are compared wherever both days
    have the value.
    """
    if len(logs) < 2:
        return 0.0

    improvements = 0
    comparisons = 0
    for prev, curr in zip(logs, logs[1:]):
        for accessor in (achievement_of, training_of):
            before, after = accessor(prev), accessor(curr)
            if _both_recorded(before, after):
                comparisons += 1
                if after > before:
                    improvements += 1

    return (improvements / comparisons) * 100 if comparisons > 0 else 0.0


def calculate_adherence_score(logs: list[DailyLog], program: Optional[ActiveProgram]) -> float:
    """Average per-day adherence to the program targets.

    Per day: calorie check (within 200 of target) and training check (at
    least 30 minutes), each applied only when its data exists. The day scores
    passed / applicable * 100. The mean divides by every log, including days
    with no applicable check.
    """
    if program is None or not logs:
        return 0.0

    daily_calories = program.nutrition_targets.daily_calories
    total = 0.0
    for log in logs:
        passed = 0
        applicable = 0

        calories = calories_of(log)
        if is_recorded(calories) and daily_calories:
            applicable += 1
            if abs(calories - daily_calories) < CALORIE_ADHERENCE_DELTA:
                passed += 1

        duration = training_of(log)
        if is_recorded(duration) and program.training_days_per_week:
            applicable += 1
            if duration >= MIN_ADHERENT_SESSION_MINUTES:
                passed += 1

        if applicable > 0:
            total += (passed / applicable) * 100

    return total / len(logs)


def calculate_overall_progress(logs: list[DailyLog], goal: Optional[Goal]) -> float:
    """Blend of achievement gain and (for weight loss) kilograms lost.

    Signals: latest minus first achievement score; for a weight-loss goal with
    weight on both ends and an actual loss, loss * 10. The mean of the
    applicable signals is clamped to [0, 100].
    """
    if not logs:
        return 0.0

    first, latest = logs[0], logs[-1]
    progress = 0.0
    factors = 0

    first_score, latest_score = achievement_of(first), achievement_of(latest)
    if _both_recorded(first_score, latest_score):
        progress += latest_score - first_score
        factors += 1

    first_weight, latest_weight = weight_of(first), weight_of(latest)
    if goal == Goal.WEIGHT_LOSS and _both_recorded(first_weight, latest_weight):
        weight_lost = first_weight - latest_weight
        if weight_lost > 0:
            progress += weight_lost * WEIGHT_LOSS_MULTIPLIER
            factors += 1

    if factors == 0:
        return 0.0
    return min(100.0, max(0.0, progress / factors))


def calculate_scores(
    logs: list[DailyLog],
    program: Optional[ActiveProgram],
    goal: Optional[Goal] = None,
) -> CompositeScores:
    """Calculate all four composite scores for a window of logs.

    Args:
        logs: Daily logs in ascending date order (may be empty)
        program: The active program, if any
        goal: Goal override; defaults to the program's goal

    Returns:
        CompositeScores with every score rounded to an integer
    """
    if not logs:
        return CompositeScores()

    if goal is None and program is not None:
        goal = program.goal

    return CompositeScores(
        consistency_score=round_half_up(calculate_consistency_score(logs)),
        improvement_score=round_half_up(calculate_improvement_score(logs)),
        adherence_score=round_half_up(calculate_adherence_score(logs, program)),
        overall_progress=round_half_up(calculate_overall_progress(logs, goal)),
    )
