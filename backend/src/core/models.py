"""Core Data Models - Pydantic models for type safety.

Stored records (daily logs, programs, profiles) and the derived analytics
values computed from them. Models carry validation only, no behavior.
"""

from datetime import datetime
from datetime import date as DateType
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field
import uuid


# ==================== Enums ====================


class ActivityKind(str, Enum):
    CARDIO = "cardio"
    STRENGTH = "strength"
    HIIT = "hiit"
    YOGA = "yoga"
    REST = "rest"
    OTHER = "other"


class Intensity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"


class Mood(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    BAD = "bad"
    TERRIBLE = "terrible"


class Goal(str, Enum):
    WEIGHT_LOSS = "weight_loss"
    MUSCLE_GAIN = "muscle_gain"
    MAINTENANCE = "maintenance"
    ENDURANCE = "endurance"


class StatsPeriod(str, Enum):
    """Period names accepted by the period statistics surface."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class AdvancedPeriod(str, Enum):
    """Period names accepted by the advanced statistics surface."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class MetricType(str, Enum):
    WEIGHT = "weight"
    CALORIES = "calories"
    ACHIEVEMENT = "achievement"
    TRAINING = "training"
    WATER = "water"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class InsightCategory(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    RECOMMENDATION = "recommendation"
    PREDICTION = "prediction"


class ChartType(str, Enum):
    ACHIEVEMENT = "achievement"
    CALORIES = "calories"
    WATER = "water"
    TRAINING = "training"
    WEIGHT = "weight"


# ==================== Daily Log ====================


class TrainingEntry(BaseModel):
    """A day's training session."""

    activity_kind: ActivityKind = Field(default=ActivityKind.OTHER)
    duration_minutes: Optional[float] = Field(default=None, ge=0, le=300, description="Session length")
    intensity: Optional[Intensity] = None
    calories_burned: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class Meal(BaseModel):
    name: str = Field(min_length=1)
    time: Optional[str] = None
    calories: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None


class NutritionEntry(BaseModel):
    """A day's food and water intake."""

    calories_consumed: Optional[float] = Field(default=None, ge=0, le=10000)
    protein_grams: Optional[float] = Field(default=None, ge=0)
    carbs_grams: Optional[float] = Field(default=None, ge=0)
    fats_grams: Optional[float] = Field(default=None, ge=0)
    water_liters: Optional[float] = Field(default=None, ge=0, le=10)
    meals: list[Meal] = Field(default_factory=list)
    supplements: list[str] = Field(default_factory=list)


class BodyMetrics(BaseModel):
    """Optional body measurements taken on the day."""

    weight_kg: Optional[float] = Field(default=None, ge=30, le=200)
    sleep_hours: Optional[float] = Field(default=None, ge=0, le=24)
    mood: Optional[Mood] = None
    stress_level: Optional[int] = Field(default=None, ge=1, le=10)
    energy_level: Optional[int] = Field(default=None, ge=1, le=10)


class Deviations(BaseModel):
    """Signed distance from the program targets. Negative = under target."""

    calories: float = 0
    protein: float = 0
    training_percent: float = 0


class ProgramProgress(BaseModel):
    """Derived per-day standing against the active program."""

    program_id: Optional[str] = None
    is_on_track: bool = False
    deviation_from_plan: Deviations = Field(default_factory=Deviations)
    achievement_score: int = Field(default=0, ge=0, le=100)


class DailyLog(BaseModel):
    """One record per user per calendar day."""

    user_id: str
    log_date: DateType = Field(description="Date of this log (YYYY-MM-DD)")
    training: Optional[TrainingEntry] = None
    nutrition: Optional[NutritionEntry] = None
    body_metrics: Optional[BodyMetrics] = None
    program_progress: ProgramProgress = Field(default_factory=ProgramProgress)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# ==================== Program & User ====================


class NutritionTargets(BaseModel):
    daily_calories: float = Field(ge=0, description="Daily calorie target")
    protein_grams: float = Field(ge=0, description="Daily protein target in grams")
    carbs_grams: float = Field(default=0, ge=0)
    fats_grams: float = Field(default=0, ge=0)
    water_liters: Optional[float] = Field(default=None, ge=0)


class ActiveProgram(BaseModel):
    """A user's program. The most recently created one is the active one."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    goal: Goal
    training_days_per_week: int = Field(ge=1, le=7)
    nutrition_targets: NutritionTargets
    baseline_weight_kg: Optional[float] = Field(
        default=None, ge=30, le=200, description="Body weight when the program started"
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)


class UserProfile(BaseModel):
    """Profile fields the analytics read: goal and baseline weight."""

    user_id: str
    email: str
    goal: Goal = Goal.MAINTENANCE
    weight_kg: Optional[float] = Field(default=None, ge=30, le=200)
    created_at: datetime = Field(default_factory=datetime.utcnow)


# ==================== Derived Analytics ====================


class MetricPoint(BaseModel):
    log_date: DateType
    value: Optional[float]


class MetricSeries(BaseModel):
    """A metric's values in ascending date order, gap-filled."""

    metric: MetricType
    points: list[MetricPoint] = Field(default_factory=list)

    @property
    def values(self) -> list[Optional[float]]:
        return [p.value for p in self.points]

    def __len__(self) -> int:
        return len(self.points)


class SeriesBundle(BaseModel):
    """All metric series extracted from one window of logs.

    Each series has its own index space: a series only holds the days on
    which that metric was recorded.
    """

    dates: list[DateType] = Field(default_factory=list)
    weight: MetricSeries = Field(default_factory=lambda: MetricSeries(metric=MetricType.WEIGHT))
    calories: MetricSeries = Field(default_factory=lambda: MetricSeries(metric=MetricType.CALORIES))
    achievement: MetricSeries = Field(default_factory=lambda: MetricSeries(metric=MetricType.ACHIEVEMENT))
    training: MetricSeries = Field(default_factory=lambda: MetricSeries(metric=MetricType.TRAINING))
    water: MetricSeries = Field(default_factory=lambda: MetricSeries(metric=MetricType.WATER))

    def by_metric(self) -> list[MetricSeries]:
        return [self.weight, self.calories, self.achievement, self.training, self.water]


class TrendResult(BaseModel):
    metric: MetricType
    direction: TrendDirection
    slope: float
    r_squared: float
    confidence: float = Field(ge=0, le=100)
    predicted_value: float
    unit: str
    current_value: float
    starting_value: float
    change: float


class CompositeScores(BaseModel):
    consistency_score: int = Field(default=0, ge=0, le=100)
    improvement_score: int = Field(default=0, ge=0, le=100)
    adherence_score: int = Field(default=0, ge=0, le=100)
    overall_progress: int = Field(default=0, ge=0, le=100)


class Comparison(BaseModel):
    """Second-half mean against first-half mean for one metric."""

    metric: str
    current: float
    previous: float
    percentage_change: float
    is_improvement: bool


class Predictions(BaseModel):
    weight_in_two_weeks: Optional[float] = None
    estimated_goal_date: Optional[DateType] = None
    probability_of_success: Optional[int] = Field(default=None, ge=0, le=100)


class Insight(BaseModel):
    """Structured insight; rendering to text is left to the client."""

    kind: str
    category: InsightCategory
    confidence: float = Field(ge=0, le=100)
    data: dict[str, Any] = Field(default_factory=dict)


class Recommendation(BaseModel):
    code: str
    category: str
    message: str
    action: Optional[str] = None


class ChartPoint(BaseModel):
    x: DateType
    y: float
    extras: dict[str, Any] = Field(default_factory=dict)


class AnalyticsSummary(BaseModel):
    status: str
    overall_progress: int
    positive_trends: float = Field(description="Share of trends moving the right way, in percent")
    key_insight: str
    recommendation: str


class AdvancedStatistics(BaseModel):
    """Payload of the advanced statistics surface."""

    period: AdvancedPeriod
    start_date: DateType
    end_date: DateType
    series: SeriesBundle
    trends: list[TrendResult]
    scores: CompositeScores
    predictions: Predictions
    comparisons: list[Comparison]
    insights: list[Insight]
    chart_data: dict[str, Any]
    summary: AnalyticsSummary


class RecordedDay(BaseModel):
    """Result of logging a day."""

    log: DailyLog
    achievement_score: int
    is_on_track: bool
    recommendations: list[Recommendation] = Field(default_factory=list)


class PeriodAverages(BaseModel):
    achievement: Optional[float] = None
    calories: Optional[float] = None
    water: Optional[float] = None
    protein: Optional[float] = None
    training_duration: Optional[float] = None


class PeriodTotals(BaseModel):
    training_days: int = 0
    total_days: int = 0
    training_frequency: float = 0


class PeriodPerformance(BaseModel):
    best_day: int = 0
    worst_day: int = 0
    consistency: float = Field(default=0, description="Share of on-track days, in percent")


class PeriodStatistics(BaseModel):
    """Payload of the period statistics surface."""

    period: StatsPeriod
    days: int
    start_date: DateType
    end_date: DateType
    averages: Optional[PeriodAverages] = None
    totals: Optional[PeriodTotals] = None
    performance: Optional[PeriodPerformance] = None
    comparison_with_plan: Optional[dict[str, Any]] = None
    recommendations: list[Recommendation] = Field(default_factory=list)
    trends: list[TrendResult] = Field(default_factory=list)
    chart_data: dict[str, Any] = Field(default_factory=dict)
