"""Row mapping shared by the Supabase and local repositories.

Rows use the snake_case column layout of the ``profiles``, ``macro_targets``,
``food_entries`` and ``fasting_sessions`` tables. Missing values in stored
profile rows fall back to the defaults of a freshly created profile.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any, TypeVar
from uuid import UUID

from keto_tracker.domain.fasting import FastingProtocol, FastingSession, FastingStage
from keto_tracker.domain.food import FoodEntry, MacroTotals, MealType
from keto_tracker.domain.metabolism import ActivityLevel, Goal, MacroTargets, Sex
from keto_tracker.domain.profiles import (
    FastingExperience,
    GoalSettings,
    PersonalInfo,
    Preferences,
    Subscription,
    SubscriptionTier,
    UserProfile,
)

_E = TypeVar("_E", bound=StrEnum)

Row = dict[str, Any]


def profile_to_row(profile: UserProfile) -> Row:
    info = profile.personal_info
    goals = profile.goals
    prefs = profile.preferences
    sub = profile.subscription
    return {
        "id": str(profile.id),
        "email": profile.email,
        "personal_info": {
            "age": info.age,
            "gender": str(info.sex),
            "height": info.height_cm,
            "current_weight": info.current_weight_kg,
            "target_weight": info.target_weight_kg,
            "activity_level": str(info.activity_level),
        },
        "goals": {
            "primary": str(goals.primary),
            "timeline": goals.timeline_weeks,
            "weekly_weight_loss_target": goals.weekly_weight_loss_target_kg,
        },
        "preferences": {
            "dietary_restrictions": list(prefs.dietary_restrictions),
            "disliked_foods": list(prefs.disliked_foods),
            "preferred_meal_times": list(prefs.preferred_meal_times),
            "fasting_experience": str(prefs.fasting_experience),
        },
        "subscription": {
            "tier": str(sub.tier),
            "expires_at": sub.expires_at.isoformat() if sub.expires_at else None,
            "features": list(sub.features),
        },
        "is_onboarded": profile.is_onboarded,
    }


def profile_from_row(row: Row) -> UserProfile:
    info = row.get("personal_info") or {}
    goals = row.get("goals") or {}
    prefs = row.get("preferences") or {}
    sub = row.get("subscription") or {}
    defaults = GoalSettings()
    expires_at = sub.get("expires_at")
    return UserProfile(
        id=UUID(str(row["id"])),
        email=row.get("email") or "",
        personal_info=PersonalInfo(
            age=info.get("age") or 0,
            sex=_enum_or_default(Sex, info.get("gender"), Sex.MALE),
            height_cm=info.get("height") or 0,
            current_weight_kg=info.get("current_weight") or 0,
            target_weight_kg=info.get("target_weight") or 0,
            activity_level=_enum_or_default(
                ActivityLevel, info.get("activity_level"), ActivityLevel.MODERATE
            ),
        ),
        goals=GoalSettings(
            primary=_enum_or_default(Goal, goals.get("primary"), defaults.primary),
            timeline_weeks=goals.get("timeline") or defaults.timeline_weeks,
            weekly_weight_loss_target_kg=goals.get("weekly_weight_loss_target")
            or defaults.weekly_weight_loss_target_kg,
        ),
        preferences=Preferences(
            dietary_restrictions=list(prefs.get("dietary_restrictions") or []),
            disliked_foods=list(prefs.get("disliked_foods") or []),
            preferred_meal_times=list(prefs.get("preferred_meal_times") or []),
            fasting_experience=_enum_or_default(
                FastingExperience,
                prefs.get("fasting_experience"),
                FastingExperience.BEGINNER,
            ),
        ),
        subscription=Subscription(
            tier=_enum_or_default(
                SubscriptionTier, sub.get("tier"), SubscriptionTier.FREE
            ),
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
            features=list(sub.get("features") or []),
        ),
        is_onboarded=bool(row.get("is_onboarded", False)),
    )


def macro_targets_to_row(user_id: UUID, targets: MacroTargets) -> Row:
    return {
        "user_id": str(user_id),
        "calories": targets.calories,
        "carbs": targets.carbs_grams,
        "protein": targets.protein_grams,
        "fat": targets.fat_grams,
    }


def macro_targets_from_row(row: Row) -> MacroTargets:
    return MacroTargets(
        calories=int(row["calories"]),
        carbs_grams=int(row["carbs"]),
        protein_grams=int(row["protein"]),
        fat_grams=int(row["fat"]),
    )


def food_entry_to_row(user_id: UUID, entry: FoodEntry) -> Row:
    return {
        "id": str(entry.id),
        "user_id": str(user_id),
        "name": entry.name,
        "brand": entry.brand,
        "serving_size": entry.serving_size,
        "serving_unit": entry.serving_unit,
        "macros": {
            "calories": entry.macros.calories,
            "carbs": entry.macros.carbs,
            "protein": entry.macros.protein,
            "fat": entry.macros.fat,
        },
        "meal_type": str(entry.meal_type),
        "logged_at": entry.logged_at.isoformat(),
    }


def food_entry_from_row(row: Row) -> FoodEntry:
    macros = row.get("macros") or {}
    return FoodEntry(
        id=UUID(str(row["id"])),
        name=row["name"],
        brand=row.get("brand"),
        serving_size=float(row["serving_size"]),
        serving_unit=row["serving_unit"],
        macros=MacroTotals(
            calories=float(macros.get("calories", 0)),
            carbs=float(macros.get("carbs", 0)),
            protein=float(macros.get("protein", 0)),
            fat=float(macros.get("fat", 0)),
        ),
        meal_type=MealType(row["meal_type"]),
        logged_at=datetime.fromisoformat(row["logged_at"]),
    )


def fasting_session_to_row(session: FastingSession) -> Row:
    return {
        "id": str(session.id),
        "user_id": str(session.user_id),
        "start_time": session.start_time.isoformat(),
        "planned_end_time": session.planned_end_time.isoformat(),
        "actual_end_time": (
            session.actual_end_time.isoformat() if session.actual_end_time else None
        ),
        "protocol": str(session.protocol),
        "current_stage": str(session.current_stage),
    }


def fasting_session_from_row(row: Row) -> FastingSession:
    actual_end = row.get("actual_end_time")
    return FastingSession(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        start_time=datetime.fromisoformat(row["start_time"]),
        planned_end_time=datetime.fromisoformat(row["planned_end_time"]),
        protocol=FastingProtocol(row["protocol"]),
        current_stage=_enum_or_default(
            FastingStage, row.get("current_stage"), FastingStage.DIGESTION
        ),
        actual_end_time=datetime.fromisoformat(actual_end) if actual_end else None,
    )


def _enum_or_default(enum_type: type[_E], value: object, default: _E) -> _E:
    try:
        return enum_type(value)
    except ValueError:
        return default
