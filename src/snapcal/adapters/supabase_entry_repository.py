"""Supabase repository for food entries."""

from dataclasses import dataclass

from supabase import Client

from snapcal.adapters.supabase_errors import execute
from snapcal.domain.entries import LITE_COLUMNS, Entry, entry_from_row, entry_to_row
from snapcal.services.entries import EntryRepository

ENTRIES_TABLE = "food_entries"


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for entries.

    List reads are capped at ``list_limit`` rows to bound payload size.
    """

    client: Client
    list_limit: int = 200

    def upsert(self, entry: Entry) -> None:
        """Insert or replace an entry row by id."""
        execute(
            self.client.table(ENTRIES_TABLE).upsert(entry_to_row(entry)),
            "save entry",
        )

    def upsert_many(self, entries: list[Entry]) -> None:
        """Insert or replace entry rows in one request."""
        if not entries:
            return
        execute(
            self.client.table(ENTRIES_TABLE).upsert(
                [entry_to_row(entry) for entry in entries]
            ),
            "save entries",
        )

    def list_entries(self, user_id: str, columns: tuple[str, ...]) -> list[Entry]:
        """Return the user's most recent entries with the given projection."""
        response = execute(
            self.client.table(ENTRIES_TABLE)
            .select(", ".join(columns))
            .eq("user_id", user_id)
            .order("timestamp", desc=True)
            .limit(self.list_limit),
            "list entries",
        )
        return [entry_from_row(row) for row in response.data or []]

    def list_for_date(self, user_id: str, day: str) -> list[Entry]:
        """Return the user's lite entries for one date, newest first."""
        response = execute(
            self.client.table(ENTRIES_TABLE)
            .select(", ".join(LITE_COLUMNS))
            .eq("user_id", user_id)
            .eq("date", day)
            .order("timestamp", desc=True),
            "list entries for date",
        )
        return [entry_from_row(row) for row in response.data or []]

    def get_image(self, user_id: str, entry_id: str) -> str | None:
        """Return only the image column of an owned entry."""
        response = execute(
            self.client.table(ENTRIES_TABLE)
            .select("image_url")
            .eq("id", entry_id)
            .eq("user_id", user_id)
            .limit(1),
            "get image",
        )
        if not response.data:
            return None
        return response.data[0].get("image_url")

    def delete(self, user_id: str, entry_id: str) -> None:
        """Delete an owned entry; unmatched filters delete nothing."""
        execute(
            self.client.table(ENTRIES_TABLE)
            .delete()
            .eq("id", entry_id)
            .eq("user_id", user_id),
            "delete entry",
        )
