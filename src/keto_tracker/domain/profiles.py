"""Domain models for user profiles."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from keto_tracker.domain.metabolism import ActivityLevel, Goal, Sex, UserBiometrics


class FastingExperience(StrEnum):
    """How familiar the user is with intermittent fasting."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SubscriptionTier(StrEnum):
    """Subscription plan."""

    FREE = "free"
    PREMIUM = "premium"
    ELITE = "elite"


@dataclass(frozen=True)
class PersonalInfo:
    """Body measurements and activity."""

    age: int = 0
    sex: Sex = Sex.MALE
    height_cm: float = 0
    current_weight_kg: float = 0
    target_weight_kg: float = 0
    activity_level: ActivityLevel = ActivityLevel.MODERATE


@dataclass(frozen=True)
class GoalSettings:
    """Dieting goal and pace."""

    primary: Goal = Goal.WEIGHT_LOSS
    timeline_weeks: int = 12
    weekly_weight_loss_target_kg: float = 0.5


@dataclass(frozen=True)
class Preferences:
    """Food and fasting preferences."""

    dietary_restrictions: list[str] = field(default_factory=list)
    disliked_foods: list[str] = field(default_factory=list)
    preferred_meal_times: list[str] = field(default_factory=list)
    fasting_experience: FastingExperience = FastingExperience.BEGINNER


@dataclass(frozen=True)
class Subscription:
    """Subscription state."""

    tier: SubscriptionTier = SubscriptionTier.FREE
    expires_at: datetime | None = None
    features: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UserProfile:
    """A user's profile as stored by a profile repository."""

    id: UUID
    email: str
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    goals: GoalSettings = field(default_factory=GoalSettings)
    preferences: Preferences = field(default_factory=Preferences)
    subscription: Subscription = field(default_factory=Subscription)
    is_onboarded: bool = False

    def has_required_biometrics(self) -> bool:
        """Return True when age, height and weight are filled in."""
        info = self.personal_info
        return bool(info.age and info.height_cm and info.current_weight_kg)

    def to_biometrics(self) -> UserBiometrics:
        """Project the profile onto metabolism calculation inputs."""
        info = self.personal_info
        return UserBiometrics(
            weight_kg=info.current_weight_kg,
            height_cm=info.height_cm,
            age_years=info.age,
            sex=info.sex,
            activity_level=info.activity_level,
            goal=self.goals.primary,
            weekly_weight_loss_target_kg=self.goals.weekly_weight_loss_target_kg,
            target_weight_kg=info.target_weight_kg,
        )


class PersonalInfoUpdate(BaseModel):
    """Partial update for personal info."""

    age: int | None = Field(default=None, ge=13, le=120)
    sex: Sex | None = None
    height_cm: float | None = Field(default=None, ge=100, le=250)
    current_weight_kg: float | None = Field(default=None, ge=30, le=300)
    target_weight_kg: float | None = Field(default=None, ge=30, le=300)
    activity_level: ActivityLevel | None = None


class GoalsUpdate(BaseModel):
    """Partial update for goals."""

    primary: Goal | None = None
    timeline_weeks: int | None = Field(default=None, gt=0)
    weekly_weight_loss_target_kg: float | None = Field(default=None, gt=0, le=1.0)


class PreferencesUpdate(BaseModel):
    """Partial update for preferences."""

    dietary_restrictions: list[str] | None = None
    disliked_foods: list[str] | None = None
    preferred_meal_times: list[str] | None = None
    fasting_experience: FastingExperience | None = None


class ProfileUpdate(BaseModel):
    """Typed partial profile update, one optional block per section."""

    personal_info: PersonalInfoUpdate | None = None
    goals: GoalsUpdate | None = None
    preferences: PreferencesUpdate | None = None

    def changes_biometrics(self) -> bool:
        """Return True when the update touches metabolism inputs."""
        return _has_changes(self.personal_info) or _has_changes(self.goals)


def changed_fields(section: BaseModel | None) -> dict[str, object]:
    """Return the explicitly set, non-null fields of an update section."""
    if section is None:
        return {}
    return {
        key: value
        for key, value in section.model_dump(exclude_unset=True).items()
        if value is not None
    }


def _has_changes(section: BaseModel | None) -> bool:
    return bool(changed_fields(section))
