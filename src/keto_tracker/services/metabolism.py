"""Metabolism and macro target calculations.

All functions here are pure: they never touch storage and never raise on
out-of-range numbers. Callers are expected to run ``validate_biometrics``
before trusting a result.
"""

import math

from keto_tracker.domain.metabolism import (
    ActivityLevel,
    Goal,
    MacroTargets,
    MetabolismResult,
    Sex,
    UserBiometrics,
    ValidationFailure,
)

_TDEE_MULTIPLIERS: dict[str, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}
_DEFAULT_TDEE_MULTIPLIER = _TDEE_MULTIPLIERS[ActivityLevel.MODERATE]

_WATER_MULTIPLIERS: dict[str, float] = {
    ActivityLevel.SEDENTARY: 1.0,
    ActivityLevel.LIGHT: 1.1,
    ActivityLevel.MODERATE: 1.2,
    ActivityLevel.ACTIVE: 1.3,
    ActivityLevel.VERY_ACTIVE: 1.4,
}
_DEFAULT_WATER_MULTIPLIER = _WATER_MULTIPLIERS[ActivityLevel.SEDENTARY]

KCAL_PER_KG_FAT = 7700
MIN_DAILY_CALORIES = 1200
MUSCLE_GAIN_SURPLUS = 400
WATER_ML_PER_KG = 35

CARB_RATIO = 0.05
PROTEIN_RATIO = 0.25
FAT_RATIO = 0.70
KCAL_PER_GRAM_CARB = 4
KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_FAT = 9

AGE_RANGE = (13, 120)
HEIGHT_RANGE_CM = (100, 250)
WEIGHT_RANGE_KG = (30, 300)


def compute_bmr(
    weight_kg: float, height_cm: float, age_years: float, sex: Sex | str
) -> float:
    """Return the Mifflin-St Jeor basal metabolic rate in kcal/day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age_years
    if sex == Sex.MALE:
        return base + 5
    if sex == Sex.FEMALE:
        return base - 161
    # midpoint of the male and female offsets
    return base - 78


def compute_tdee(bmr: float, activity_level: ActivityLevel | str) -> float:
    """Scale BMR by the activity multiplier, defaulting to moderate."""
    multiplier = _TDEE_MULTIPLIERS.get(activity_level, _DEFAULT_TDEE_MULTIPLIER)
    return bmr * multiplier


def compute_macro_targets(
    tdee: float,
    goal: Goal | str,
    weekly_weight_loss_target_kg: float = 0.5,
) -> MacroTargets:
    """Return daily calories and ketogenic macro grams for a goal."""
    if goal == Goal.WEIGHT_LOSS:
        daily_deficit = (weekly_weight_loss_target_kg * KCAL_PER_KG_FAT) / 7
        target_calories = max(tdee - daily_deficit, MIN_DAILY_CALORIES)
    elif goal == Goal.MUSCLE_GAIN:
        target_calories = tdee + MUSCLE_GAIN_SURPLUS
    else:
        target_calories = tdee

    # Fields are rounded independently and may not cross-foot to calories.
    return MacroTargets(
        calories=_round_half_up(target_calories),
        carbs_grams=_round_half_up(
            target_calories * CARB_RATIO / KCAL_PER_GRAM_CARB
        ),
        protein_grams=_round_half_up(
            target_calories * PROTEIN_RATIO / KCAL_PER_GRAM_PROTEIN
        ),
        fat_grams=_round_half_up(target_calories * FAT_RATIO / KCAL_PER_GRAM_FAT),
    )


def compute_user_metabolism(biometrics: UserBiometrics) -> MetabolismResult:
    """Run BMR, TDEE and macro calculations for a user.

    Macro targets are derived from the unrounded TDEE; only the reported
    ``bmr`` and ``tdee`` values are rounded.
    """
    bmr = compute_bmr(
        biometrics.weight_kg,
        biometrics.height_cm,
        biometrics.age_years,
        biometrics.sex,
    )
    tdee = compute_tdee(bmr, biometrics.activity_level)
    macro_targets = compute_macro_targets(
        tdee,
        biometrics.goal,
        biometrics.weekly_weight_loss_target_kg,
    )
    return MetabolismResult(
        bmr=_round_half_up(bmr),
        tdee=_round_half_up(tdee),
        macro_targets=macro_targets,
    )


def validate_biometrics(biometrics: UserBiometrics) -> list[ValidationFailure]:
    """Return every biometric field that falls outside its supported range."""
    checks = (
        (
            "age",
            biometrics.age_years,
            AGE_RANGE,
            "Age must be between {} and {} years",
        ),
        (
            "height",
            biometrics.height_cm,
            HEIGHT_RANGE_CM,
            "Height must be between {} and {} cm",
        ),
        (
            "current_weight",
            biometrics.weight_kg,
            WEIGHT_RANGE_KG,
            "Current weight must be between {} and {} kg",
        ),
        (
            "target_weight",
            biometrics.target_weight_kg,
            WEIGHT_RANGE_KG,
            "Target weight must be between {} and {} kg",
        ),
    )
    failures: list[ValidationFailure] = []
    for field, value, (minimum, maximum), template in checks:
        if value is not None and minimum <= value <= maximum:
            continue
        failures.append(
            ValidationFailure(
                field=field,
                minimum=minimum,
                maximum=maximum,
                message=template.format(minimum, maximum),
            )
        )
    return failures


def compute_water_intake_liters(
    weight_kg: float, activity_level: ActivityLevel | str
) -> float:
    """Return recommended daily water intake in liters, one decimal place."""
    multiplier = _WATER_MULTIPLIERS.get(activity_level, _DEFAULT_WATER_MULTIPLIER)
    milliliters = weight_kg * WATER_ML_PER_KG * multiplier
    tenths = milliliters / 1000 * 10
    if not math.isfinite(tenths):
        return tenths
    return math.floor(tenths + 0.5) / 10


def _round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up.

    Non-finite values are returned unchanged so NaN reaches the caller.
    """
    if not math.isfinite(value):
        return value  # type: ignore[return-value]
    return math.floor(value + 0.5)
