"""Unit tests for insights, summaries and recommendations."""

from datetime import date

from src.core.insights import (
    generate_daily_recommendations,
    generate_insights,
    generate_statistical_recommendations,
    generate_summary,
    progress_status,
)
from src.core.models import (
    Comparison,
    CompositeScores,
    Goal,
    Insight,
    InsightCategory,
    MetricType,
    PeriodAverages,
    PeriodPerformance,
    PeriodTotals,
    Predictions,
    TrendDirection,
    TrendResult,
)


def make_trend(metric: MetricType, direction: TrendDirection, change: float = 0) -> TrendResult:
    return TrendResult(
        metric=metric,
        direction=direction,
        slope=0.5 if direction == TrendDirection.UP else -0.5,
        r_squared=0.9,
        confidence=50,
        predicted_value=0,
        unit="kg",
        current_value=0,
        starting_value=0,
        change=change,
    )


# Middling consistency so the consistency rule stays quiet
QUIET_SCORES = CompositeScores(consistency_score=60)


class TestGenerateInsights:
    """Tests for generate_insights."""

    def test_weight_loss_on_track(self):
        """Falling weight with a weight-loss goal is a success."""
        trends = [make_trend(MetricType.WEIGHT, TrendDirection.DOWN, change=-2.34)]
        insights = generate_insights(trends, QUIET_SCORES, [], Predictions(), Goal.WEIGHT_LOSS)

        assert len(insights) == 1
        assert insights[0].kind == "weight_loss_on_track"
        assert insights[0].category == InsightCategory.SUCCESS
        assert insights[0].confidence == 85
        assert insights[0].data == {"lost_kg": 2.3}

    def test_muscle_gain_on_track(self):
        """Rising weight with a muscle-gain goal is a success."""
        trends = [make_trend(MetricType.WEIGHT, TrendDirection.UP, change=1.5)]
        insights = generate_insights(trends, QUIET_SCORES, [], Predictions(), Goal.MUSCLE_GAIN)
        assert [i.kind for i in insights] == ["muscle_gain_on_track"]

    def test_weight_against_goal_is_silent(self):
        """Falling weight with a muscle-gain goal raises nothing."""
        trends = [make_trend(MetricType.WEIGHT, TrendDirection.DOWN)]
        assert generate_insights(trends, QUIET_SCORES, [], Predictions(), Goal.MUSCLE_GAIN) == []

    def test_consistency_thresholds(self):
        """80+ is a success, 50 or below is a warning."""
        high = generate_insights([], CompositeScores(consistency_score=85), [], Predictions(), None)
        low = generate_insights([], CompositeScores(consistency_score=40), [], Predictions(), None)

        assert high[0].kind == "consistency_high"
        assert high[0].confidence == 90
        assert low[0].kind == "consistency_low"
        assert low[0].category == InsightCategory.WARNING
        assert low[0].confidence == 75

    def test_adherence_high(self):
        """Adherence of 75+ is a success."""
        scores = CompositeScores(consistency_score=60, adherence_score=80)
        insights = generate_insights([], scores, [], Predictions(), None)
        assert [i.kind for i in insights] == ["adherence_high"]

    def test_calorie_shift(self):
        """A calorie change over 10% raises a warning with its direction."""
        comparisons = [Comparison(
            metric="calories_consumed",
            current=1600,
            previous=2000,
            percentage_change=-20.0,
            is_improvement=False,
        )]
        insights = generate_insights([], QUIET_SCORES, comparisons, Predictions(), None)

        assert insights[0].kind == "calorie_intake_shift"
        assert insights[0].category == InsightCategory.WARNING
        assert insights[0].data == {"direction": "decreased", "percentage_change": 20.0}

    def test_goal_prediction(self):
        """A success probability over 70 becomes a prediction insight."""
        predictions = Predictions(
            weight_in_two_weeks=88, estimated_goal_date=date(2025, 1, 15), probability_of_success=80
        )
        insights = generate_insights([], QUIET_SCORES, [], predictions, Goal.WEIGHT_LOSS)

        assert insights[0].kind == "goal_on_schedule"
        assert insights[0].category == InsightCategory.PREDICTION
        assert insights[0].confidence == 80
        assert insights[0].data["estimated_goal_date"] == "2025-01-15"

    def test_rule_order(self):
        """Several rules fire together in a fixed order."""
        trends = [make_trend(MetricType.WEIGHT, TrendDirection.DOWN, change=-1)]
        scores = CompositeScores(consistency_score=90, adherence_score=90)
        predictions = Predictions(probability_of_success=75)
        insights = generate_insights(trends, scores, [], predictions, Goal.WEIGHT_LOSS)

        assert [i.kind for i in insights] == [
            "weight_loss_on_track",
            "consistency_high",
            "adherence_high",
            "goal_on_schedule",
        ]


class TestGenerateSummary:
    """Tests for generate_summary and progress_status."""

    def test_progress_status(self):
        """Overall progress maps onto four bands."""
        assert progress_status(10) == "needs_improvement"
        assert progress_status(40) == "good"
        assert progress_status(75) == "very_good"
        assert progress_status(95) == "excellent"

    def test_positive_trends(self):
        """Falling weight and rising training both count as positive."""
        trends = [
            make_trend(MetricType.WEIGHT, TrendDirection.DOWN),
            make_trend(MetricType.TRAINING, TrendDirection.UP),
            make_trend(MetricType.CALORIES, TrendDirection.DOWN),
        ]
        insight = Insight(kind="consistency_high", category=InsightCategory.SUCCESS, confidence=90)
        summary = generate_summary(trends, CompositeScores(consistency_score=90), [insight])

        assert summary.positive_trends == 66.7
        assert summary.key_insight == "consistency_high"
        assert summary.recommendation == "keep_going"

    def test_empty(self):
        """No trends and no insights still give a summary."""
        summary = generate_summary([], CompositeScores(), [])

        assert summary.status == "needs_improvement"
        assert summary.positive_trends == 0
        assert summary.key_insight == "keep_tracking"
        assert summary.recommendation == "build_routine"

    def test_rising_weight_recommendation(self):
        """Rising weight with a steady routine suggests checking calories."""
        trends = [make_trend(MetricType.WEIGHT, TrendDirection.UP)]
        summary = generate_summary(trends, CompositeScores(consistency_score=70), [])
        assert summary.recommendation == "check_calorie_intake"


class TestDailyRecommendations:
    """Tests for generate_daily_recommendations."""

    def test_below_target(self, make_log, program):
        """A low score with little water and a short session gets three nudges."""
        log = make_log(0, duration=20, water=1.5, score=30)
        codes = [r.code for r in generate_daily_recommendations(log, program)]
        assert codes == ["below_daily_target", "drink_more_water", "train_longer"]

    def test_great_day(self, make_log, program):
        """85 and above is congratulated."""
        log = make_log(0, duration=60, score=90)
        codes = [r.code for r in generate_daily_recommendations(log, program)]
        assert codes == ["great_day"]

    def test_middle_score_is_quiet(self, make_log, program):
        """Scores between 70 and 85 get no score-based message."""
        log = make_log(0, duration=60, score=75)
        assert generate_daily_recommendations(log, program) == []

    def test_weight_loss_over_calories(self, make_log, make_program):
        """Eating over target on a weight-loss program is flagged."""
        log = make_log(0, calories=2300, score=75)
        codes = [r.code for r in generate_daily_recommendations(log, make_program(goal=Goal.WEIGHT_LOSS))]
        assert codes == ["stay_under_calories"]

    def test_muscle_gain_low_protein(self, make_log, make_program):
        """Missing protein on a muscle-gain program is flagged."""
        log = make_log(0, protein=100, score=75)
        codes = [r.code for r in generate_daily_recommendations(log, make_program(goal=Goal.MUSCLE_GAIN))]
        assert codes == ["more_protein"]

    def test_goal_override(self, make_log, program):
        """An explicit goal replaces the program's."""
        log = make_log(0, calories=2300, score=75)
        codes = [r.code for r in generate_daily_recommendations(log, program, Goal.WEIGHT_LOSS)]
        assert codes == ["stay_under_calories"]


class TestStatisticalRecommendations:
    """Tests for generate_statistical_recommendations."""

    def test_all_rules(self, program):
        """Low consistency, rare training and off-target calories all fire."""
        recommendations = generate_statistical_recommendations(
            PeriodAverages(calories=2400),
            PeriodTotals(training_days=2, total_days=7, training_frequency=28.6),
            PeriodPerformance(best_day=80, worst_day=20, consistency=28.6),
            program,
            "week",
        )
        codes = [r.code for r in recommendations]

        assert codes == ["improve_consistency", "train_more_often", "adjust_calories"]
        assert recommendations[2].action == "Reduce portions slightly."

    def test_on_plan(self, program):
        """A consistent, on-target week gets no recommendations."""
        recommendations = generate_statistical_recommendations(
            PeriodAverages(calories=2050),
            PeriodTotals(training_days=5, total_days=7, training_frequency=71.4),
            PeriodPerformance(best_day=95, worst_day=70, consistency=100),
            program,
            "week",
        )
        assert recommendations == []

    def test_no_logs(self, program):
        """Without aggregates there is nothing to recommend."""
        assert generate_statistical_recommendations(None, None, None, program, "week") == []
