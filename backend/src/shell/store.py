"""Store Interfaces - Repository protocols and the in-memory adapter.

Services depend on these protocols only. Two adapters exist: the Firestore
client for deployments and InMemoryStore for a single process.
"""

import logging
import threading
from datetime import date, datetime
from typing import Protocol

from ..core.models import ActiveProgram, DailyLog, UserProfile


logger = logging.getLogger(__name__)


class LogStore(Protocol):
    def find_logs(self, user_id: str, start_date: date, end_date: date) -> list[DailyLog]:
        """Logs in [start_date, end_date], ascending by date."""
        ...

    def list_logs(
        self,
        user_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 30,
    ) -> list[DailyLog]:
        """Most recent logs first, optionally bounded by date."""
        ...

    def upsert_log(self, log: DailyLog) -> DailyLog:
        """Insert the log, or overwrite the one stored for the same day."""
        ...


class ProgramStore(Protocol):
    def find_latest_program(self, user_id: str) -> ActiveProgram | None:
        ...

    def save_program(self, program: ActiveProgram) -> ActiveProgram:
        ...


class UserStore(Protocol):
    def find_user(self, user_id: str) -> UserProfile | None:
        ...

    def save_user(self, profile: UserProfile) -> UserProfile:
        ...


class InMemoryStore:
    """Process-wide store for a single process.

    One lock guards every collection for the lifetime of the process. Logs
    are keyed by (user_id, log_date), which makes same-day writes overwrite.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._logs: dict[tuple[str, date], DailyLog] = {}
        self._programs: dict[str, list[ActiveProgram]] = {}
        self._users: dict[str, UserProfile] = {}

    # ==================== Daily Log Operations ====================

    def find_logs(self, user_id: str, start_date: date, end_date: date) -> list[DailyLog]:
        logger.debug("Fetching logs for %s from %s to %s", user_id[:8], start_date, end_date)
        with self._lock:
            logs = [
                log for (uid, log_date), log in self._logs.items()
                if uid == user_id and start_date <= log_date <= end_date
            ]
        return sorted(logs, key=lambda log: log.log_date)

    def list_logs(
        self,
        user_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 30,
    ) -> list[DailyLog]:
        with self._lock:
            logs = [
                log for (uid, log_date), log in self._logs.items()
                if uid == user_id
                and (start_date is None or log_date >= start_date)
                and (end_date is None or log_date <= end_date)
            ]
        logs.sort(key=lambda log: log.log_date, reverse=True)
        return logs[:limit]

    def upsert_log(self, log: DailyLog) -> DailyLog:
        logger.info("Saving log for %s on %s", log.user_id[:8], log.log_date)
        key = (log.user_id, log.log_date)
        with self._lock:
            existing = self._logs.get(key)
            saved = log.model_copy(update={
                "created_at": existing.created_at if existing else log.created_at,
                "updated_at": datetime.utcnow(),
            })
            self._logs[key] = saved
        return saved

    # ==================== Program Operations ====================

    def find_latest_program(self, user_id: str) -> ActiveProgram | None:
        with self._lock:
            programs = list(self._programs.get(user_id, []))
        if not programs:
            return None
        # Ties go to the program saved last.
        return max(reversed(programs), key=lambda p: p.created_at)

    def save_program(self, program: ActiveProgram) -> ActiveProgram:
        logger.info("Saving program for %s: %s", program.user_id[:8], program.goal.value)
        with self._lock:
            self._programs.setdefault(program.user_id, []).append(program)
        return program

    # ==================== User Operations ====================

    def find_user(self, user_id: str) -> UserProfile | None:
        with self._lock:
            return self._users.get(user_id)

    def save_user(self, profile: UserProfile) -> UserProfile:
        logger.info("Saving profile for %s", profile.user_id[:8])
        with self._lock:
            self._users[profile.user_id] = profile
        return profile
