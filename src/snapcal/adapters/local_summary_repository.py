"""Device-local repository for archived daily rollups."""

from dataclasses import dataclass

from snapcal.adapters.local_entry_repository import load_entry_rows, save_entry_rows
from snapcal.adapters.local_storage import (
    SUMMARIES_KEY,
    KeyValueStore,
    read_json,
    write_json,
)
from snapcal.domain.entries import EntryTotals, totals_from_row
from snapcal.domain.summaries import (
    ArchivedSummary,
    archived_from_row,
    archived_to_row,
)
from snapcal.services.summaries import SummaryRepository


@dataclass
class LocalSummaryRepository(SummaryRepository):
    """Rollups kept as one JSON list on the device."""

    store: KeyValueStore

    def list_entry_totals(
        self, user_id: str, before: str | None = None
    ) -> list[EntryTotals]:
        """Return aggregate rows of the user's live entries."""
        return [
            totals_from_row(row)
            for row in load_entry_rows(self.store)
            if row.get("user_id") == user_id
            and (before is None or str(row.get("date")) < before)
        ]

    def list_archived(self, user_id: str) -> list[ArchivedSummary]:
        """Return the user's archived rollups."""
        return [
            archived_from_row(row)
            for row in self._rows()
            if row.get("user_id") == user_id
        ]

    def upsert_archived(self, summary: ArchivedSummary) -> None:
        """Insert or replace a rollup keyed by user and date."""
        rows = [
            row
            for row in self._rows()
            if (row.get("user_id"), row.get("date")) != (summary.user_id, summary.date)
        ]
        rows.append(archived_to_row(summary))
        write_json(self.store, SUMMARIES_KEY, rows)

    def delete_entries_for_date(self, user_id: str, day: str) -> None:
        """Delete the user's live entries for a date."""
        rows = load_entry_rows(self.store)
        remaining = [
            row
            for row in rows
            if not (row.get("user_id") == user_id and row.get("date") == day)
        ]
        if len(remaining) != len(rows):
            save_entry_rows(self.store, remaining)

    def _rows(self) -> list[dict[str, object]]:
        rows = read_json(self.store, SUMMARIES_KEY, [])
        return rows if isinstance(rows, list) else []
