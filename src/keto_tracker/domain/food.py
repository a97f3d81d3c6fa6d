"""Domain models for the food log."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field


class MealType(StrEnum):
    """Meal a food entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MacroTotals:
    """Calories and macronutrient grams."""

    calories: float = 0
    carbs: float = 0
    protein: float = 0
    fat: float = 0

    def __add__(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            calories=self.calories + other.calories,
            carbs=self.carbs + other.carbs,
            protein=self.protein + other.protein,
            fat=self.fat + other.fat,
        )


@dataclass(frozen=True)
class FoodEntry:
    """A logged food."""

    id: UUID
    name: str
    brand: str | None
    serving_size: float
    serving_unit: str
    macros: MacroTotals
    meal_type: MealType
    logged_at: datetime


class MacrosPayload(BaseModel):
    """Macronutrients supplied with a food entry."""

    calories: float = Field(ge=0)
    carbs: float = Field(ge=0)
    protein: float = Field(ge=0)
    fat: float = Field(ge=0)

    def to_totals(self) -> MacroTotals:
        return MacroTotals(
            calories=self.calories,
            carbs=self.carbs,
            protein=self.protein,
            fat=self.fat,
        )


class NewFoodEntry(BaseModel):
    """Input for logging a food."""

    name: str = Field(min_length=1)
    brand: str | None = None
    serving_size: float = Field(gt=0)
    serving_unit: str = Field(min_length=1)
    macros: MacrosPayload
    meal_type: MealType
    logged_at: AwareDatetime | None = None


class FoodEntryUpdate(BaseModel):
    """Partial update for a logged food."""

    name: str | None = Field(default=None, min_length=1)
    brand: str | None = None
    serving_size: float | None = Field(default=None, gt=0)
    serving_unit: str | None = Field(default=None, min_length=1)
    macros: MacrosPayload | None = None
    meal_type: MealType | None = None
