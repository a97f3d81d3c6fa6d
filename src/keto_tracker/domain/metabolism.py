"""Domain models for metabolism calculations."""

from dataclasses import dataclass
from enum import StrEnum


class Sex(StrEnum):
    """Biological sex used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(StrEnum):
    """Self-reported daily activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class Goal(StrEnum):
    """Primary dieting goal."""

    WEIGHT_LOSS = "weightLoss"
    MAINTENANCE = "maintenance"
    MUSCLE_GAIN = "muscleGain"


@dataclass(frozen=True)
class UserBiometrics:
    """Inputs required to compute metabolism targets."""

    weight_kg: float
    height_cm: float
    age_years: float
    sex: Sex | str
    activity_level: ActivityLevel | str
    goal: Goal | str
    weekly_weight_loss_target_kg: float = 0.5
    target_weight_kg: float | None = None


@dataclass(frozen=True)
class MacroTargets:
    """Daily calorie and macronutrient targets."""

    calories: int
    carbs_grams: int
    protein_grams: int
    fat_grams: int


@dataclass(frozen=True)
class MetabolismResult:
    """Computed BMR, TDEE and macro targets for a user."""

    bmr: int
    tdee: int
    macro_targets: MacroTargets


@dataclass(frozen=True)
class ValidationFailure:
    """A biometric field outside its supported range."""

    field: str
    minimum: float
    maximum: float
    message: str
