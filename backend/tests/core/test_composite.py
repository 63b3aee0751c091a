"""Unit tests for composite scores."""

from src.core.composite import (
    calculate_adherence_score,
    calculate_consistency_score,
    calculate_improvement_score,
    calculate_overall_progress,
    calculate_scores,
)
from src.core.models import CompositeScores, Goal


class TestConsistencyScore:
    """Tests for calculate_consistency_score."""

    def test_identical_days(self, make_log):
        """Two identical days are fully consistent."""
        logs = [make_log(0, duration=45, calories=2000), make_log(1, duration=45, calories=2000)]
        assert calculate_consistency_score(logs) == 100

    def test_half_consistent(self, make_log):
        """A 30-minute training swing fails one of the two checks."""
        logs = [make_log(0, duration=30, calories=2000), make_log(1, duration=60, calories=2100)]
        assert calculate_consistency_score(logs) == 50

    def test_missing_metric_counts_against(self, make_log):
        """Pairs without calories still count in the denominator."""
        logs = [make_log(0, duration=45), make_log(1, duration=50)]
        assert calculate_consistency_score(logs) == 50

    def test_single_log(self, make_log):
        """One log has no pairs."""
        assert calculate_consistency_score([make_log(0, duration=45)]) == 0


class TestImprovementScore:
    """Tests for calculate_improvement_score."""

    def test_mixed(self, make_log):
        """One of two comparable pairs improved."""
        logs = [make_log(0, score=50), make_log(1, score=60), make_log(2, score=55)]
        assert calculate_improvement_score(logs) == 50

    def test_training_counts(self, make_log):
        """Longer sessions count as improvements."""
        logs = [make_log(0, duration=30), make_log(1, duration=40)]
        assert calculate_improvement_score(logs) == 100

    def test_nothing_comparable(self, make_log):
        """Zero scores and missing training give no comparisons."""
        logs = [make_log(0), make_log(1)]
        assert calculate_improvement_score(logs) == 0


class TestAdherenceScore:
    """Tests for calculate_adherence_score."""

    def test_divides_by_every_log(self, make_log, program):
        """Days with no applicable check still count in the mean."""
        logs = [
            make_log(0, calories=2100, duration=45),
            make_log(1, calories=2500, duration=20),
            make_log(2),
        ]
        assert round(calculate_adherence_score(logs, program)) == 33

    def test_partial_day(self, make_log, program):
        """A day passing one of two checks scores 50."""
        logs = [make_log(0, calories=2050, duration=15)]
        assert calculate_adherence_score(logs, program) == 50

    def test_no_program(self, make_log):
        """Adherence needs a program."""
        assert calculate_adherence_score([make_log(0, calories=2000)], None) == 0


class TestOverallProgress:
    """Tests for calculate_overall_progress."""

    def test_weight_loss_blend(self, make_log):
        """Achievement gain and kilograms lost are averaged."""
        logs = [make_log(0, score=50, weight=90), make_log(1, score=80, weight=88)]
        assert calculate_overall_progress(logs, Goal.WEIGHT_LOSS) == 25

    def test_other_goals_ignore_weight(self, make_log):
        """Only weight loss counts kilograms."""
        logs = [make_log(0, score=50, weight=90), make_log(1, score=80, weight=88)]
        assert calculate_overall_progress(logs, Goal.MAINTENANCE) == 30

    def test_weight_gain_not_counted(self, make_log):
        """Gaining weight adds no weight-loss signal."""
        logs = [make_log(0, score=50, weight=88), make_log(1, score=80, weight=90)]
        assert calculate_overall_progress(logs, Goal.WEIGHT_LOSS) == 30

    def test_clamped_at_zero(self, make_log):
        """A falling score never goes below 0."""
        logs = [make_log(0, score=80), make_log(1, score=50)]
        assert calculate_overall_progress(logs, None) == 0

    def test_clamped_at_100(self, make_log):
        """Large weight losses are capped at 100."""
        logs = [make_log(0, weight=100), make_log(1, weight=80)]
        assert calculate_overall_progress(logs, Goal.WEIGHT_LOSS) == 100


class TestCalculateScores:
    """Tests for calculate_scores."""

    def test_empty(self, program):
        """No logs gives all zeros."""
        assert calculate_scores([], program) == CompositeScores()

    def test_goal_defaults_to_program(self, make_log, make_program):
        """The program's goal decides whether weight lost counts."""
        logs = [make_log(0, weight=90), make_log(1, weight=88)]
        scores = calculate_scores(logs, make_program(goal=Goal.WEIGHT_LOSS))
        assert scores.overall_progress == 20

    def test_half_scores_round_up(self, make_log, program):
        """5 of 8 consistency checks is 62.5, reported as 63."""
        logs = [
            make_log(i, duration=45, calories=calories)
            for i, calories in enumerate([2000, 2000, 2500, 3000, 3500])
        ]
        assert calculate_consistency_score(logs) == 62.5
        assert calculate_scores(logs, program).consistency_score == 63

    def test_all_scores_are_ints(self, make_log, program):
        """Every score is rounded to an integer."""
        logs = [
            make_log(0, calories=2100, duration=45),
            make_log(1, calories=2500, duration=20),
            make_log(2),
        ]
        scores = calculate_scores(logs, program)
        assert scores.adherence_score == 33
        assert all(isinstance(v, int) for v in scores.model_dump().values())
