"""Request bodies for the HTTP API."""

from pydantic import BaseModel, Field

from keto_tracker.domain.fasting import FastingProtocol
from keto_tracker.domain.metabolism import Sex, UserBiometrics


class BiometricsRequest(BaseModel):
    """Biometrics for a stateless metabolism calculation.

    ``activity_level`` and ``goal`` are plain strings: unknown values fall back
    to the documented defaults instead of being rejected.
    """

    weight_kg: float
    height_cm: float
    age_years: float
    sex: Sex
    activity_level: str
    goal: str
    weekly_weight_loss_target_kg: float = 0.5
    target_weight_kg: float | None = None

    def to_biometrics(self) -> UserBiometrics:
        return UserBiometrics(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            age_years=self.age_years,
            sex=self.sex,
            activity_level=self.activity_level,
            goal=self.goal,
            weekly_weight_loss_target_kg=self.weekly_weight_loss_target_kg,
            target_weight_kg=self.target_weight_kg,
        )


class EnsureProfileRequest(BaseModel):
    email: str = Field(min_length=3)


class OnboardedRequest(BaseModel):
    onboarded: bool


class StartFastingRequest(BaseModel):
    protocol: FastingProtocol
    duration_hours: float = Field(gt=0)
