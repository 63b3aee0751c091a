"""Firestore Client - Persistence for daily logs, programs and profiles.

This module handles all database I/O for the fitness log.
All I/O is contained here; business logic is in the core module.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from google.cloud import firestore

from ..core.errors import StoreError
from ..core.models import ActiveProgram, DailyLog, UserProfile


logger = logging.getLogger(__name__)


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
    """

    project_id: str | None = None
    database: str | None = None


class FitLogFirestoreClient:
    """Client for persisting fitness logs, programs and profiles to Firestore.

    Document structure per user:
        users/{user_id}/
            profile/config: { email, goal, weight_kg, ... }
            logs/{YYYY-MM-DD}: { log_date, training, nutrition, ... }
            programs/{program_id}: { goal, nutrition_targets, created_at, ... }

    Logs are keyed by date, so saving a log for a day that already has one
    overwrites it in a single write. Any Firestore failure is raised as
    StoreError.
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _user_ref(self, user_id: str) -> firestore.DocumentReference:
        """Get reference to user document."""
        return self.client.collection("users").document(user_id)

    def _profile_ref(self, user_id: str) -> firestore.DocumentReference:
        """Get reference to user profile document."""
        return self._user_ref(user_id).collection("profile").document("config")

    def _log_ref(self, user_id: str, log_date: date) -> firestore.DocumentReference:
        """Get reference to daily log document."""
        return self._user_ref(user_id).collection("logs").document(log_date.isoformat())

    def _program_ref(self, user_id: str, program_id: str) -> firestore.DocumentReference:
        """Get reference to program document."""
        return self._user_ref(user_id).collection("programs").document(program_id)

    # ==================== Profile Operations ====================

    def find_user(self, user_id: str) -> UserProfile | None:
        """Fetch a user's profile.

        Args:
            user_id: The user's ID

        Returns:
            UserProfile if found, None otherwise
        """
        logger.debug("Fetching profile for user: %s", user_id[:8])
        try:
            doc = self._profile_ref(user_id).get()
        except Exception as e:
            logger.error("Failed to fetch profile: %s", str(e))
            raise StoreError("Failed to fetch profile") from e
        if not doc.exists:
            return None
        return UserProfile(**doc.to_dict())

    def save_user(self, profile: UserProfile) -> UserProfile:
        """Save a user's profile."""
        logger.info("Saving profile for user: %s", profile.user_id[:8])
        try:
            self._profile_ref(profile.user_id).set(profile.model_dump(mode="json"))
        except Exception as e:
            logger.error("Failed to save profile: %s", str(e))
            raise StoreError("Failed to save profile") from e
        return profile

    # ==================== Program Operations ====================

    def find_latest_program(self, user_id: str) -> ActiveProgram | None:
        """Fetch the most recently created program.

        Args:
            user_id: The user's ID

        Returns:
            ActiveProgram if the user has one, None otherwise
        """
        logger.debug("Fetching latest program for user: %s", user_id[:8])
        try:
            query = (
                self._user_ref(user_id).collection("programs")
                .order_by("created_at", direction=firestore.Query.DESCENDING)
                .limit(1)
            )
            docs = list(query.stream())
        except Exception as e:
            logger.error("Failed to fetch program: %s", str(e))
            raise StoreError("Failed to fetch program") from e
        if not docs:
            return None
        return ActiveProgram(**docs[0].to_dict())

    def save_program(self, program: ActiveProgram) -> ActiveProgram:
        """Save a program. Programs are never overwritten, only added."""
        logger.info("Saving program for user: %s", program.user_id[:8])
        try:
            self._program_ref(program.user_id, program.id).set(program.model_dump(mode="json"))
        except Exception as e:
            logger.error("Failed to save program: %s", str(e))
            raise StoreError("Failed to save program") from e
        return program

    # ==================== Daily Log Operations ====================

    def _to_log(self, data: dict) -> DailyLog:
        if isinstance(data.get("log_date"), str):
            data["log_date"] = date.fromisoformat(data["log_date"])
        return DailyLog(**data)

    def get_log(self, user_id: str, log_date: date) -> DailyLog | None:
        """Fetch a daily log.

        Args:
            user_id: The user's ID
            log_date: Date of the log

        Returns:
            DailyLog if found, None otherwise
        """
        logger.debug("Fetching log for %s on %s", user_id[:8], log_date)
        try:
            doc = self._log_ref(user_id, log_date).get()
        except Exception as e:
            logger.error("Failed to fetch log: %s", str(e))
            raise StoreError("Failed to fetch log") from e
        if not doc.exists:
            return None
        return self._to_log(doc.to_dict())

    def upsert_log(self, log: DailyLog) -> DailyLog:
        """Save a daily log, replacing any log already stored for that day.

        Args:
            log: The log to save

        Returns:
            The saved log
        """
        logger.info("Saving log for %s on %s", log.user_id[:8], log.log_date)
        existing = self.get_log(log.user_id, log.log_date)
        saved = log.model_copy(update={
            "created_at": existing.created_at if existing else log.created_at,
            "updated_at": datetime.utcnow(),
        })
        try:
            self._log_ref(log.user_id, log.log_date).set(saved.model_dump(mode="json"))
        except Exception as e:
            logger.error("Failed to save log: %s", str(e))
            raise StoreError("Failed to save log") from e
        return saved

    def find_logs(self, user_id: str, start_date: date, end_date: date) -> list[DailyLog]:
        """Fetch logs for a date range.

        Args:
            user_id: The user's ID
            start_date: Start of range (inclusive)
            end_date: End of range (inclusive)

        Returns:
            List of DailyLogs ascending by date (may be empty)
        """
        logger.debug(
            "Fetching logs for %s from %s to %s", user_id[:8], start_date, end_date
        )
        try:
            logs_ref = self._user_ref(user_id).collection("logs")
            query = (
                logs_ref.where("log_date", ">=", start_date.isoformat())
                .where("log_date", "<=", end_date.isoformat())
                .order_by("log_date")
            )
            logs = [self._to_log(doc.to_dict()) for doc in query.stream()]
        except Exception as e:
            logger.error("Failed to fetch logs range: %s", str(e))
            raise StoreError("Failed to fetch logs") from e

        logger.debug("Found %d logs in range", len(logs))
        return logs

    def list_logs(
        self,
        user_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 30,
    ) -> list[DailyLog]:
        """Fetch the most recent logs, newest first."""
        try:
            query = self._user_ref(user_id).collection("logs")
            if start_date is not None:
                query = query.where("log_date", ">=", start_date.isoformat())
            if end_date is not None:
                query = query.where("log_date", "<=", end_date.isoformat())
            query = query.order_by("log_date", direction=firestore.Query.DESCENDING).limit(limit)
            return [self._to_log(doc.to_dict()) for doc in query.stream()]
        except Exception as e:
            logger.error("Failed to list logs: %s", str(e))
            raise StoreError("Failed to list logs") from e
