"""Fasting session tracking."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from keto_tracker.domain.fasting import (
    FastingProtocol,
    FastingSession,
    FastingSessionUpdate,
    FastingStage,
)

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

_logger = logging.getLogger(__name__)


class FastingSessionActiveError(RuntimeError):
    """Raised when starting a fast while another one is running."""

    def __init__(self, session: FastingSession) -> None:
        super().__init__(f"Fasting session already active: {session.id}")
        self.session = session


class FastingSessionRepository(Protocol):
    """Persistence interface for fasting sessions."""

    def create_session(self, session: FastingSession) -> None:
        """Store a new session."""

    def get_active_session(self, user_id: UUID) -> FastingSession | None:
        """Return the running session for a user, if any."""

    def update_session(self, session: FastingSession) -> None:
        """Overwrite a stored session."""

    def list_completed_sessions(self, user_id: UUID) -> list[FastingSession]:
        """Return completed sessions ordered by end time, oldest first."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class FastingService:
    """Service for starting, ending and summarising fasts."""

    repository: FastingSessionRepository
    clock: Callable[[], datetime] = field(default=_utc_now)

    def start_fasting(
        self,
        user_id: UUID,
        protocol: FastingProtocol,
        duration_hours: float,
    ) -> FastingSession:
        """Start a fast that is planned to last ``duration_hours``."""
        if duration_hours <= 0:
            raise ValueError("duration_hours must be positive")
        active = self.repository.get_active_session(user_id)
        if active is not None:
            raise FastingSessionActiveError(active)
        now = self.clock()
        session = FastingSession(
            id=uuid4(),
            user_id=user_id,
            start_time=now,
            planned_end_time=now + timedelta(hours=duration_hours),
            protocol=protocol,
            current_stage=FastingStage.DIGESTION,
        )
        self.repository.create_session(session)
        _logger.info(
            "Started fast: user_id=%s protocol=%s hours=%s",
            user_id,
            protocol,
            duration_hours,
        )
        return session

    def end_fasting(self, user_id: UUID) -> FastingSession | None:
        """Complete the running fast, if there is one."""
        active = self.repository.get_active_session(user_id)
        if active is None:
            return None
        completed = replace(active, actual_end_time=self.clock())
        self.repository.update_session(completed)
        return completed

    def get_current_session(self, user_id: UUID) -> FastingSession | None:
        """Return the running fast, if there is one."""
        return self.repository.get_active_session(user_id)

    def update_current_session(
        self, user_id: UUID, update: FastingSessionUpdate
    ) -> FastingSession | None:
        """Apply a partial update to the running fast."""
        active = self.repository.get_active_session(user_id)
        if active is None:
            return None
        changes = {
            key: value
            for key, value in update.model_dump(exclude_unset=True).items()
            if value is not None
        }
        updated = replace(active, **changes)
        self.repository.update_session(updated)
        return updated

    def get_current_fasting_duration(self, user_id: UUID) -> int:
        """Return whole hours elapsed in the running fast, 0 if none."""
        active = self.repository.get_active_session(user_id)
        if active is None:
            return 0
        elapsed = self.clock() - active.start_time
        return int(elapsed.total_seconds() // SECONDS_PER_HOUR)

    def get_fasting_streak(self, user_id: UUID) -> int:
        """Count consecutive days, back from today, with a completed fast."""
        now = self.clock()
        streak = 0
        for session in reversed(self.repository.list_completed_sessions(user_id)):
            if session.actual_end_time is None:
                continue
            days_ago = int(
                (now - session.actual_end_time).total_seconds() // SECONDS_PER_DAY
            )
            if days_ago != streak:
                break
            streak += 1
        return streak
