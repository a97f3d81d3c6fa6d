"""Profile repository persisted in the local key-value store."""

from dataclasses import dataclass
from uuid import UUID

from keto_tracker.adapters.json_store import KeyValueStore
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
class LocalProfileRepository(ProfileRepository):
    """Stores one profile document and one macro target row per user."""

    store: KeyValueStore

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        row = self.store.get(_profile_key(user_id))
        if not isinstance(row, dict):
            return None
        return profile_from_row(row)

    def create_profile(self, user_id: UUID, email: str) -> UserProfile:
        return self.save_profile(UserProfile(id=user_id, email=email))

    def save_profile(self, profile: UserProfile) -> UserProfile:
        row = profile_to_row(profile)
        self.store.set(_profile_key(profile.id), row)
        return profile_from_row(row)

    def set_onboarded(self, user_id: UUID, onboarded: bool) -> None:
        row = self.store.get(_profile_key(user_id))
        if not isinstance(row, dict):
            return
        row["is_onboarded"] = onboarded
        self.store.set(_profile_key(user_id), row)

    def get_macro_targets(self, user_id: UUID) -> MacroTargets | None:
        row = self.store.get(_macro_targets_key(user_id))
        if not isinstance(row, dict):
            return None
        return macro_targets_from_row(row)

    def set_macro_targets(self, user_id: UUID, targets: MacroTargets) -> None:
        self.store.set(
            _macro_targets_key(user_id), macro_targets_to_row(user_id, targets)
        )


def _profile_key(user_id: UUID) -> str:
    return f"profiles:{user_id}"


def _macro_targets_key(user_id: UUID) -> str:
    return f"macro_targets:{user_id}"
