"""Food entry repository persisted in the local key-value store."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from keto_tracker.adapters.json_store import KeyValueStore
from keto_tracker.adapters.rows import Row, food_entry_from_row, food_entry_to_row
from keto_tracker.domain.food import FoodEntry
from keto_tracker.services.food_log import FoodEntryRepository


@dataclass
class LocalFoodEntryRepository(FoodEntryRepository):
    """Keeps each user's food entries as a list under one key."""

    store: KeyValueStore

    def add_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        rows = self._rows(user_id)
        rows.append(food_entry_to_row(user_id, entry))
        self._save(user_id, rows)

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        for row in self._rows(user_id):
            if row["id"] == str(entry_id):
                return food_entry_from_row(row)
        return None

    def replace_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        rows = [
            food_entry_to_row(user_id, entry) if row["id"] == str(entry.id) else row
            for row in self._rows(user_id)
        ]
        self._save(user_id, rows)

    def remove_entry(self, user_id: UUID, entry_id: UUID) -> None:
        rows = [row for row in self._rows(user_id) if row["id"] != str(entry_id)]
        self._save(user_id, rows)

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodEntry]:
        entries = [food_entry_from_row(row) for row in self._rows(user_id)]
        in_range = [entry for entry in entries if start <= entry.logged_at < end]
        return sorted(in_range, key=lambda entry: entry.logged_at)

    def _rows(self, user_id: UUID) -> list[Row]:
        rows = self.store.get(_key(user_id))
        return list(rows) if isinstance(rows, list) else []

    def _save(self, user_id: UUID, rows: list[Row]) -> None:
        if rows:
            self.store.set(_key(user_id), rows)
        else:
            self.store.delete(_key(user_id))


def _key(user_id: UUID) -> str:
    return f"food_entries:{user_id}"
