"""Unit tests for daily scoring - pure functions, no mocks needed."""

import pytest

from src.core.models import Goal, Intensity, NutritionEntry, TrainingEntry
from src.core.scoring import (
    build_program_progress,
    calculate_daily_score,
    calculate_deviations,
    calorie_points,
    hydration_points,
    is_on_track,
    protein_points,
    training_points,
)


class TestTrainingPoints:
    """Tests for training_points."""

    def test_no_training(self):
        """Missing training scores nothing."""
        assert training_points(None) == 0

    def test_half_point_per_minute(self):
        """Each minute is worth half a point."""
        assert training_points(TrainingEntry(duration_minutes=30)) == 15
        assert training_points(TrainingEntry(duration_minutes=60)) == 30

    def test_capped_at_30(self):
        """Sessions over an hour still score 30."""
        assert training_points(TrainingEntry(duration_minutes=120)) == 30

    def test_high_intensity_bonus_on_top_of_cap(self):
        """High intensity adds 5 even when the duration is capped."""
        entry = TrainingEntry(duration_minutes=90, intensity=Intensity.HIGH)
        assert training_points(entry) == 35

    def test_no_bonus_without_duration(self):
        """Intensity alone scores nothing."""
        assert training_points(TrainingEntry(intensity=Intensity.HIGH)) == 0
        assert training_points(TrainingEntry(duration_minutes=0, intensity=Intensity.HIGH)) == 0

    def test_other_intensities_get_no_bonus(self):
        """Only high intensity earns the bonus."""
        entry = TrainingEntry(duration_minutes=60, intensity=Intensity.EXTREME)
        assert training_points(entry) == 30


class TestHydrationPoints:
    """Tests for hydration_points."""

    def test_partial_water(self):
        """1.25 liters is half the target, worth 10 points."""
        assert hydration_points(NutritionEntry(water_liters=1.25)) == 10

    def test_capped_at_20(self):
        """Drinking past 2.5 liters still scores 20."""
        assert hydration_points(NutritionEntry(water_liters=5)) == 20

    def test_zero_water(self):
        """Zero water counts as not logged."""
        assert hydration_points(NutritionEntry(water_liters=0)) == 0


class TestNutritionAccuracy:
    """Tests for calorie_points and protein_points."""

    def test_exact_calories(self, program):
        """Hitting the calorie target exactly scores 30."""
        assert calorie_points(NutritionEntry(calories_consumed=2000), program) == 30

    def test_double_calories(self, program):
        """Eating twice the target scores 0."""
        assert calorie_points(NutritionEntry(calories_consumed=4000), program) == 0

    def test_calories_far_over_floor_at_zero(self, program):
        """Accuracy never goes negative."""
        assert calorie_points(NutritionEntry(calories_consumed=9000), program) == 0

    def test_calories_ten_percent_off(self, program):
        """10% off target loses 10% of the points."""
        assert calorie_points(NutritionEntry(calories_consumed=1800), program) == pytest.approx(27)

    def test_no_program(self):
        """Accuracy needs a target."""
        assert calorie_points(NutritionEntry(calories_consumed=2000), None) == 0
        assert protein_points(NutritionEntry(protein_grams=150), None) == 0

    def test_zero_target_scores_nothing(self, make_program):
        """A zero target never divides by zero."""
        program = make_program(daily_calories=0, protein_grams=0)
        nutrition = NutritionEntry(calories_consumed=2000, protein_grams=100)
        assert calorie_points(nutrition, program) == 0
        assert protein_points(nutrition, program) == 0

    def test_exact_protein(self, program):
        """Hitting the protein target exactly scores 20."""
        assert protein_points(NutritionEntry(protein_grams=150), program) == 20


class TestCalculateDailyScore:
    """Tests for calculate_daily_score."""

    def test_no_data(self, program):
        """A day with nothing logged scores 0."""
        assert calculate_daily_score(None, None, program) == 0

    def test_training_only(self):
        """Training alone scores half a point per minute."""
        assert calculate_daily_score(TrainingEntry(duration_minutes=40), None, None) == 20

    def test_perfect_day(self, program):
        """An hour of training plus every target met scores 100."""
        training = TrainingEntry(duration_minutes=60)
        nutrition = NutritionEntry(calories_consumed=2000, protein_grams=150, water_liters=2.5)
        assert calculate_daily_score(training, nutrition, program) == 100

    def test_capped_at_100(self, program):
        """Bonus points never push the score past 100."""
        training = TrainingEntry.model_construct(
            activity_kind="strength", duration_minutes=1000, intensity=Intensity.HIGH
        )
        nutrition = NutritionEntry(calories_consumed=2000, protein_grams=150, water_liters=2.5)
        assert training_points(training) == 35
        assert calculate_daily_score(training, nutrition, program) == 100

    def test_half_point_rounds_up(self):
        """A 5-minute session is worth 2.5 points, which rounds up to 3."""
        assert calculate_daily_score(TrainingEntry(duration_minutes=5), None, None) == 3

    def test_returns_int(self, program):
        """Fractional points are rounded to an integer."""
        nutrition = NutritionEntry(calories_consumed=1800)
        score = calculate_daily_score(None, nutrition, program)
        assert score == 27
        assert isinstance(score, int)


class TestIsOnTrack:
    """Tests for is_on_track."""

    def test_threshold(self):
        """70 and above is on track."""
        assert is_on_track(70) is True
        assert is_on_track(69) is False


class TestCalculateDeviations:
    """Tests for calculate_deviations."""

    def test_signed_deviations(self, program):
        """Deviations are actual minus target."""
        training = TrainingEntry(duration_minutes=60)
        nutrition = NutritionEntry(calories_consumed=2200, protein_grams=120)
        deviations = calculate_deviations(training, nutrition, program)

        assert deviations.calories == 200
        assert deviations.protein == -30
        # 60 minutes against 4 days * 60 minutes
        assert deviations.training_percent == -75

    def test_no_program(self):
        """Without a program every deviation is 0."""
        nutrition = NutritionEntry(calories_consumed=2200)
        deviations = calculate_deviations(None, nutrition, None)
        assert deviations.calories == 0
        assert deviations.protein == 0
        assert deviations.training_percent == 0

    def test_missing_values_stay_zero(self, program):
        """Unlogged values leave their deviation at 0."""
        deviations = calculate_deviations(None, NutritionEntry(water_liters=2), program)
        assert deviations.calories == 0
        assert deviations.training_percent == 0


class TestBuildProgramProgress:
    """Tests for build_program_progress."""

    def test_links_program(self, program):
        """Progress records the active program's id and score."""
        training = TrainingEntry(duration_minutes=60)
        nutrition = NutritionEntry(calories_consumed=2000, protein_grams=150, water_liters=2.5)
        progress = build_program_progress(training, nutrition, program)

        assert progress.program_id == program.id
        assert progress.achievement_score == 100
        assert progress.is_on_track is True

    def test_without_program(self):
        """Without a program the score still counts training and water."""
        progress = build_program_progress(
            TrainingEntry(duration_minutes=60), NutritionEntry(water_liters=2.5), None
        )
        assert progress.program_id is None
        assert progress.achievement_score == 50
        assert progress.is_on_track is False

    def test_goal_does_not_change_score(self, make_program):
        """The score formula is the same for every goal."""
        training = TrainingEntry(duration_minutes=60)
        scores = {
            build_program_progress(training, None, make_program(goal=goal)).achievement_score
            for goal in Goal
        }
        assert scores == {30}
