"""User profile business logic."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from keto_tracker.domain.metabolism import (
    MacroTargets,
    MetabolismResult,
    ValidationFailure,
)
from keto_tracker.domain.profiles import ProfileUpdate, UserProfile, changed_fields
from keto_tracker.services.metabolism import (
    compute_user_metabolism,
    compute_water_intake_liters,
    validate_biometrics,
)

_logger = logging.getLogger(__name__)


class ProfileNotFoundError(LookupError):
    """Raised when no profile exists for a user id."""

    def __init__(self, user_id: UUID) -> None:
        super().__init__(f"Profile not found: {user_id}")
        self.user_id = user_id


class ProfileRepository(Protocol):
    """Persistence interface for profiles and their macro targets."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for a user, if present."""

    def create_profile(self, user_id: UUID, email: str) -> UserProfile:
        """Create and return a profile with default values."""

    def save_profile(self, profile: UserProfile) -> UserProfile:
        """Persist the full profile and return the stored version."""

    def set_onboarded(self, user_id: UUID, onboarded: bool) -> None:
        """Update the onboarding flag."""

    def get_macro_targets(self, user_id: UUID) -> MacroTargets | None:
        """Return the stored macro targets, if any."""

    def set_macro_targets(self, user_id: UUID, targets: MacroTargets) -> None:
        """Insert or replace the macro targets for a user."""


@dataclass
class MetabolismReport:
    """Metabolism numbers and validation state for a profile."""

    result: MetabolismResult | None
    failures: list[ValidationFailure]
    water_intake_liters: float


@dataclass
class ProfileService:
    """Application service for profiles and derived macro targets."""

    repository: ProfileRepository

    def ensure_profile(self, user_id: UUID, email: str) -> UserProfile:
        """Return the user's profile, creating a default one if missing."""
        existing = self.repository.get_profile(user_id)
        if existing:
            return existing
        _logger.info("Creating profile: user_id=%s", user_id)
        return self.repository.create_profile(user_id, email)

    def get_profile(self, user_id: UUID) -> UserProfile:
        """Return the user's profile or raise ProfileNotFoundError."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    def update_profile(self, user_id: UUID, update: ProfileUpdate) -> UserProfile:
        """Apply a partial update and resync macro targets when needed."""
        current = self.get_profile(user_id)
        updated = replace(
            current,
            personal_info=replace(
                current.personal_info, **changed_fields(update.personal_info)
            ),
            goals=replace(current.goals, **changed_fields(update.goals)),
            preferences=replace(
                current.preferences, **changed_fields(update.preferences)
            ),
        )
        saved = self.repository.save_profile(updated)
        if update.changes_biometrics():
            self.calculate_and_sync_macro_targets(saved)
        return saved

    def set_onboarded(self, user_id: UUID, onboarded: bool) -> None:
        """Mark the user's onboarding as complete or incomplete."""
        self.get_profile(user_id)
        self.repository.set_onboarded(user_id, onboarded)

    def calculate_and_sync_macro_targets(
        self, profile: UserProfile
    ) -> MetabolismResult | None:
        """Recompute macro targets and store them.

        Returns None without persisting anything while the profile is missing
        age, height or current weight.
        """
        if not profile.has_required_biometrics():
            _logger.info(
                "Skipping macro sync for incomplete profile: user_id=%s", profile.id
            )
            return None
        result = compute_user_metabolism(profile.to_biometrics())
        self.repository.set_macro_targets(profile.id, result.macro_targets)
        _logger.info(
            "Synced macro targets: user_id=%s calories=%s",
            profile.id,
            result.macro_targets.calories,
        )
        return result

    def get_macro_targets(self, user_id: UUID) -> MacroTargets | None:
        """Return the stored macro targets for a user."""
        return self.repository.get_macro_targets(user_id)

    def get_metabolism_report(self, user_id: UUID) -> MetabolismReport:
        """Return metabolism numbers, validation failures and water intake."""
        profile = self.get_profile(user_id)
        biometrics = profile.to_biometrics()
        result = (
            compute_user_metabolism(biometrics)
            if profile.has_required_biometrics()
            else None
        )
        return MetabolismReport(
            result=result,
            failures=validate_biometrics(biometrics),
            water_intake_liters=compute_water_intake_liters(
                biometrics.weight_kg, biometrics.activity_level
            ),
        )
