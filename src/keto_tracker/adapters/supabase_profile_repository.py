"""Supabase-backed profile repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from keto_tracker.adapters.rows import (
    macro_targets_from_row,
    macro_targets_to_row,
    profile_from_row,
    profile_to_row,
)
from keto_tracker.domain.metabolism import MacroTargets
from keto_tracker.domain.profiles import UserProfile
from keto_tracker.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile row for a user, if present."""
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return profile_from_row(response.data[0])

    def create_profile(self, user_id: UUID, email: str) -> UserProfile:
        """Insert a default profile row and return it."""
        row = profile_to_row(UserProfile(id=user_id, email=email))
        response = self.client.table("profiles").insert(row).execute()
        if not response.data:
            raise RuntimeError("Failed to create profile in Supabase")
        return profile_from_row(response.data[0])

    def save_profile(self, profile: UserProfile) -> UserProfile:
        """Update the profile row and return the stored version."""
        row = profile_to_row(profile)
        row.pop("id")
        row["updated_at"] = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("profiles")
            .update(row)
            .eq("id", str(profile.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update profile in Supabase")
        return profile_from_row(response.data[0])

    def set_onboarded(self, user_id: UUID, onboarded: bool) -> None:
        """Update the is_onboarded flag."""
        self.client.table("profiles").update({"is_onboarded": onboarded}).eq(
            "id", str(user_id)
        ).execute()

    def get_macro_targets(self, user_id: UUID) -> MacroTargets | None:
        """Return stored macro targets for a user."""
        response = (
            self.client.table("macro_targets")
            .select("calories, carbs, protein, fat")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return macro_targets_from_row(response.data[0])

    def set_macro_targets(self, user_id: UUID, targets: MacroTargets) -> None:
        """Upsert the macro targets row keyed by user id."""
        self.client.table("macro_targets").upsert(
            macro_targets_to_row(user_id, targets), on_conflict="user_id"
        ).execute()
