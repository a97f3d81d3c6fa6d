"""Supabase repository for food entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from keto_tracker.adapters.rows import food_entry_from_row, food_entry_to_row
from keto_tracker.domain.food import FoodEntry
from keto_tracker.services.food_log import FoodEntryRepository


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for the food log."""

    client: Client

    def add_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        """Insert a food entry row."""
        response = (
            self.client.table("food_entries")
            .insert(food_entry_to_row(user_id, entry))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry in Supabase")

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodEntry | None:
        """Return a food entry owned by the user."""
        response = (
            self.client.table("food_entries")
            .select("*")
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return food_entry_from_row(response.data[0])

    def replace_entry(self, user_id: UUID, entry: FoodEntry) -> None:
        """Overwrite the stored columns of a food entry."""
        row = food_entry_to_row(user_id, entry)
        row.pop("id")
        self.client.table("food_entries").update(row).eq("id", str(entry.id)).eq(
            "user_id", str(user_id)
        ).execute()

    def remove_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete a food entry row."""
        self.client.table("food_entries").delete().eq("id", str(entry_id)).eq(
            "user_id", str(user_id)
        ).execute()

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodEntry]:
        """Return entries logged within a time range."""
        response = (
            self.client.table("food_entries")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at")
            .execute()
        )
        return [food_entry_from_row(row) for row in response.data or []]
