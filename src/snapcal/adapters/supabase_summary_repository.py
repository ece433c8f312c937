"""Supabase repository for archived daily rollups."""

from dataclasses import dataclass

from supabase import Client

from snapcal.adapters.supabase_entry_repository import ENTRIES_TABLE
from snapcal.adapters.supabase_errors import execute
from snapcal.domain.entries import AGGREGATE_COLUMNS, EntryTotals, totals_from_row
from snapcal.domain.summaries import (
    ArchivedSummary,
    archived_from_row,
    archived_to_row,
)
from snapcal.services.summaries import SummaryRepository

SUMMARIES_TABLE = "daily_summaries"


@dataclass
class SupabaseSummaryRepository(SummaryRepository):
    """Supabase implementation for rollups and aggregate reads."""

    client: Client

    def list_entry_totals(
        self, user_id: str, before: str | None = None
    ) -> list[EntryTotals]:
        """Return aggregate columns of the user's live entries."""
        query = (
            self.client.table(ENTRIES_TABLE)
            .select(", ".join(AGGREGATE_COLUMNS))
            .eq("user_id", user_id)
        )
        if before is not None:
            query = query.lt("date", before)
        response = execute(query, "list entry totals")
        return [totals_from_row(row) for row in response.data or []]

    def list_archived(self, user_id: str) -> list[ArchivedSummary]:
        """Return the user's archived rollups."""
        response = execute(
            self.client.table(SUMMARIES_TABLE)
            .select(
                "id, user_id, date, total_calories, total_protein, total_carbs, "
                "total_fat"
            )
            .eq("user_id", user_id),
            "list summaries",
        )
        return [archived_from_row(row) for row in response.data or []]

    def upsert_archived(self, summary: ArchivedSummary) -> None:
        """Insert or replace a rollup; its id encodes user and date."""
        execute(
            self.client.table(SUMMARIES_TABLE).upsert(archived_to_row(summary)),
            "save summary",
        )

    def delete_entries_for_date(self, user_id: str, day: str) -> None:
        """Delete the user's live entries for a date."""
        execute(
            self.client.table(ENTRIES_TABLE)
            .delete()
            .eq("user_id", user_id)
            .eq("date", day),
            "delete archived entries",
        )
