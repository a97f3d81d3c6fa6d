"""Food log service."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from keto_tracker.domain.food import (
    FoodEntry,
    FoodEntryUpdate,
    MacroTotals,
    NewFoodEntry,
)

_NULLABLE_ENTRY_FIELDS = frozenset({"brand"})


class FoodEntryNotFoundError(LookupError):
    """Raised when a food entry does not exist for the user."""

    def __init__(self, entry_id: UUID) -> None:
        super().__init__(f"Food entry not found: {entry_id}")
        self.entry_id = entry_id


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def add_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        """Store a new food entry."""

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        """Return a single entry, if present."""

    def replace_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        """Overwrite an existing entry."""

    def remove_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete an entry."""

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodEntry]:
        """Return entries logged in [start, end), oldest first."""


@dataclass
class FoodLogService:
    """Service for logging foods and summing daily macros."""

    repository: FoodEntryRepository

    def add_food_entry(self, user_id: UUID, payload: NewFoodEntry) -> FoodEntry:
        """Log a food and return the stored entry."""
        entry = FoodEntry(
            id=uuid4(),
            name=payload.name,
            brand=payload.brand,
            serving_size=payload.serving_size,
            serving_unit=payload.serving_unit,
            macros=payload.macros.to_totals(),
            meal_type=payload.meal_type,
            logged_at=payload.logged_at or datetime.now(tz=UTC),
        )
        self.repository.add_entry(user_id, entry)
        return entry

    def remove_food_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete a logged food."""
        if self.repository.get_entry(user_id, entry_id) is None:
            raise FoodEntryNotFoundError(entry_id)
        self.repository.remove_entry(user_id, entry_id)

    def update_food_entry(
        self, user_id: UUID, entry_id: UUID, update: FoodEntryUpdate
    ) -> FoodEntry:
        """Apply a partial update to a logged food."""
        current = self.repository.get_entry(user_id, entry_id)
        if current is None:
            raise FoodEntryNotFoundError(entry_id)
        changes = update.model_dump(exclude_unset=True, exclude={"macros"})
        if update.macros is not None:
            changes["macros"] = update.macros.to_totals()
        updated = replace(
            current,
            **{
                key: value
                for key, value in changes.items()
                if value is not None or key in _NULLABLE_ENTRY_FIELDS
            },
        )
        self.repository.replace_entry(user_id, updated)
        return updated

    def get_history(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> list[FoodEntry]:
        """Return entries logged on a calendar day in the user's timezone."""
        start, end = _day_bounds(day, ZoneInfo(timezone_name))
        return self.repository.list_entries(user_id, start, end)

    def get_todays_entries(
        self, user_id: UUID, timezone_name: str = "UTC"
    ) -> list[FoodEntry]:
        """Return today's entries in the user's timezone."""
        today = datetime.now(tz=ZoneInfo(timezone_name)).date()
        return self.get_history(user_id, today, timezone_name)

    def get_todays_macros(
        self, user_id: UUID, timezone_name: str = "UTC"
    ) -> MacroTotals:
        """Return summed macros for today's entries."""
        total = MacroTotals()
        for entry in self.get_todays_entries(user_id, timezone_name):
            total = total + entry.macros
        return total

    def clear_todays_foods(self, user_id: UUID, timezone_name: str = "UTC") -> int:
        """Remove today's entries and return how many were removed."""
        entries = self.get_todays_entries(user_id, timezone_name)
        for entry in entries:
            self.repository.remove_entry(user_id, entry.id)
        return len(entries)


def _day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(UTC), end.astimezone(UTC)
