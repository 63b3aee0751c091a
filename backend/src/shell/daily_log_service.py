"""Daily Log Service - Records days and manages the records scoring reads.

Loads the collaborators (profile, active program), calls the pure scoring
functions and writes through the store protocols.
"""

import logging
from datetime import date

from ..core.errors import NotFoundError
from ..core.insights import generate_daily_recommendations
from ..core.models import (
    ActiveProgram,
    BodyMetrics,
    DailyLog,
    Goal,
    NutritionEntry,
    NutritionTargets,
    RecordedDay,
    TrainingEntry,
    UserProfile,
)
from ..core.scoring import build_program_progress
from .store import LogStore, ProgramStore, UserStore


logger = logging.getLogger(__name__)


class DailyLogService:
    """Operations that write daily logs, profiles and programs."""

    def __init__(self, logs: LogStore, programs: ProgramStore, users: UserStore) -> None:
        self._logs = logs
        self._programs = programs
        self._users = users

    def record_daily_log(
        self,
        user_id: str,
        training: TrainingEntry | None = None,
        nutrition: NutritionEntry | None = None,
        body_metrics: BodyMetrics | None = None,
        today: date | None = None,
    ) -> RecordedDay:
        """Score today's entries against the active program and save them.

        Logging twice on the same day overwrites the earlier log.

        Args:
            user_id: The user's ID
            training: Training entry (optional)
            nutrition: Nutrition entry (optional)
            body_metrics: Body measurements (optional)
            today: Date to log for (defaults to today)

        Returns:
            RecordedDay with the saved log, score and recommendations

        Raises:
            NotFoundError: If the user has no profile
        """
        if today is None:
            today = date.today()

        user = self._users.find_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        program = self._programs.find_latest_program(user_id)
        progress = build_program_progress(training, nutrition, program)

        log = DailyLog(
            user_id=user_id,
            log_date=today,
            training=training,
            nutrition=nutrition,
            body_metrics=body_metrics,
            program_progress=progress,
        )
        saved = self._logs.upsert_log(log)
        logger.info(
            "Recorded %s for %s: score %d", today, user_id[:8], progress.achievement_score
        )

        goal = program.goal if program else user.goal
        return RecordedDay(
            log=saved,
            achievement_score=progress.achievement_score,
            is_on_track=progress.is_on_track,
            recommendations=generate_daily_recommendations(saved, program, goal),
        )

    def list_daily_logs(
        self,
        user_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 30,
    ) -> list[DailyLog]:
        """Most recent logs first, optionally bounded by date."""
        return self._logs.list_logs(user_id, start_date, end_date, limit)

    def setup_profile(
        self,
        user_id: str,
        email: str | None,
        goal: Goal,
        weight_kg: float | None = None,
    ) -> UserProfile:
        """Create or replace the profile fields the analytics read.

        Without an email, the registered email is kept.
        """
        existing = self._users.find_user(user_id)
        if email is None:
            email = existing.email if existing else ""

        profile = UserProfile(user_id=user_id, email=email, goal=goal, weight_kg=weight_kg)
        if existing is not None:
            profile.created_at = existing.created_at
        return self._users.save_user(profile)

    def set_program(
        self,
        user_id: str,
        goal: Goal,
        training_days_per_week: int,
        targets: NutritionTargets,
        baseline_weight_kg: float | None = None,
    ) -> ActiveProgram:
        """Add a program; it becomes the active one.

        Without an explicit baseline weight, the profile weight is used.

        Raises:
            NotFoundError: If the user has no profile
        """
        user = self._users.find_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        program = ActiveProgram(
            user_id=user_id,
            goal=goal,
            training_days_per_week=training_days_per_week,
            nutrition_targets=targets,
            baseline_weight_kg=baseline_weight_kg if baseline_weight_kg is not None else user.weight_kg,
        )
        return self._programs.save_program(program)
