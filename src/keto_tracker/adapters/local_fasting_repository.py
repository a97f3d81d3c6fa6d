"""Fasting session repository persisted in the local key-value store."""

from dataclasses import dataclass
from uuid import UUID

from keto_tracker.adapters.json_store import KeyValueStore
from keto_tracker.adapters.rows import (
    Row,
    fasting_session_from_row,
    fasting_session_to_row,
)
from keto_tracker.domain.fasting import FastingSession
from keto_tracker.services.fasting import FastingSessionRepository


@dataclass
class LocalFastingSessionRepository(FastingSessionRepository):
    """Keeps each user's fasting sessions as a list under one key."""

    store: KeyValueStore

    def create_session(self, session: FastingSession) -> None:
        rows = self._rows(session.user_id)
        rows.append(fasting_session_to_row(session))
        self._save(session.user_id, rows)

    def get_active_session(self, user_id: UUID) -> FastingSession | None:
        for session in reversed(self._sessions(user_id)):
            if session.is_active:
                return session
        return None

    def update_session(self, session: FastingSession) -> None:
        rows = [
            fasting_session_to_row(session) if row["id"] == str(session.id) else row
            for row in self._rows(session.user_id)
        ]
        self._save(session.user_id, rows)

    def list_completed_sessions(self, user_id: UUID) -> list[FastingSession]:
        sessions = [
            session for session in self._sessions(user_id) if not session.is_active
        ]
        return sorted(sessions, key=lambda session: session.actual_end_time)

    def _sessions(self, user_id: UUID) -> list[FastingSession]:
        return [fasting_session_from_row(row) for row in self._rows(user_id)]

    def _rows(self, user_id: UUID) -> list[Row]:
        rows = self.store.get(_key(user_id))
        return list(rows) if isinstance(rows, list) else []

    def _save(self, user_id: UUID, rows: list[Row]) -> None:
        self.store.set(_key(user_id), rows)


def _key(user_id: UUID) -> str:
    return f"fasting_sessions:{user_id}"
