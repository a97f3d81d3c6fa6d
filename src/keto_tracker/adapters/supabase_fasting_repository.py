"""Supabase repository for fasting sessions."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from keto_tracker.adapters.rows import fasting_session_from_row, fasting_session_to_row
from keto_tracker.domain.fasting import FastingSession
from keto_tracker.services.fasting import FastingSessionRepository


@dataclass
class SupabaseFastingSessionRepository(FastingSessionRepository):
    """Supabase implementation for fasting sessions."""

    client: Client

    def create_session(self, session: FastingSession) -> None:
        """Insert a fasting session row."""
        response = (
            self.client.table("fasting_sessions")
            .insert(fasting_session_to_row(session))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create fasting session in Supabase")

    def get_active_session(self, user_id: UUID) -> FastingSession | None:
        """Return the session without an actual end time, if any."""
        response = (
            self.client.table("fasting_sessions")
            .select("*")
            .eq("user_id", str(user_id))
            .is_("actual_end_time", "null")
            .order("start_time", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return fasting_session_from_row(response.data[0])

    def update_session(self, session: FastingSession) -> None:
        """Update the mutable columns of a session."""
        row = fasting_session_to_row(session)
        self.client.table("fasting_sessions").update(
            {
                "planned_end_time": row["planned_end_time"],
                "actual_end_time": row["actual_end_time"],
                "protocol": row["protocol"],
                "current_stage": row["current_stage"],
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(session.id)).execute()

    def list_completed_sessions(self, user_id: UUID) -> list[FastingSession]:
        """Return completed sessions ordered by end time."""
        response = (
            self.client.table("fasting_sessions")
            .select("*")
            .eq("user_id", str(user_id))
            .not_.is_("actual_end_time", "null")
            .order("actual_end_time")
            .execute()
        )
        return [fasting_session_from_row(row) for row in response.data or []]
