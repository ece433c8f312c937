"""Device-local repository for food entries."""

from dataclasses import dataclass

from snapcal.adapters.local_storage import (
    ENTRIES_KEY,
    KeyValueStore,
    read_json,
    write_json,
)
from snapcal.domain.entries import (
    FULL_COLUMNS,
    LITE_COLUMNS,
    Entry,
    entry_from_row,
    entry_to_row,
    parse_timestamp,
    project_row,
)
from snapcal.services.entries import EntryRepository


def load_entry_rows(store: KeyValueStore) -> list[dict[str, object]]:
    """Return every stored entry row."""
    rows = read_json(store, ENTRIES_KEY, [])
    return rows if isinstance(rows, list) else []


def save_entry_rows(store: KeyValueStore, rows: list[dict[str, object]]) -> None:
    """Replace the stored entry rows."""
    write_json(store, ENTRIES_KEY, rows)


@dataclass
class LocalEntryRepository(EntryRepository):
    """Entries kept as one JSON list on the device. Reads are unbounded."""

    store: KeyValueStore

    def upsert(self, entry: Entry) -> None:
        """Insert or replace an entry by id."""
        self.upsert_many([entry])

    def upsert_many(self, entries: list[Entry]) -> None:
        """Insert or replace entries by id in a single write."""
        rows = load_entry_rows(self.store)
        index = {str(row.get("id")): position for position, row in enumerate(rows)}
        for entry in entries:
            row = entry_to_row(entry)
            if entry.id in index:
                rows[index[entry.id]] = row
            else:
                index[entry.id] = len(rows)
                rows.append(row)
        save_entry_rows(self.store, rows)

    def list_entries(self, user_id: str, columns: tuple[str, ...]) -> list[Entry]:
        """Return the user's entries, newest first."""
        rows = [
            row for row in load_entry_rows(self.store) if row.get("user_id") == user_id
        ]
        return _project_sorted(rows, columns)

    def list_for_date(self, user_id: str, day: str) -> list[Entry]:
        """Return the user's lite entries for one date, newest first."""
        rows = [
            row
            for row in load_entry_rows(self.store)
            if row.get("user_id") == user_id and row.get("date") == day
        ]
        return _project_sorted(rows, LITE_COLUMNS)

    def get_image(self, user_id: str, entry_id: str) -> str | None:
        """Return the image of an entry owned by the user."""
        for row in load_entry_rows(self.store):
            if row.get("id") == entry_id and row.get("user_id") == user_id:
                image = row.get("image_url")
                return str(image) if image else None
        return None

    def delete(self, user_id: str, entry_id: str) -> None:
        """Delete an entry owned by the user; other ids are left alone."""
        rows = load_entry_rows(self.store)
        remaining = [
            row
            for row in rows
            if not (row.get("id") == entry_id and row.get("user_id") == user_id)
        ]
        if len(remaining) != len(rows):
            save_entry_rows(self.store, remaining)

    def list_all(self) -> list[Entry]:
        """Return every stored entry regardless of owner."""
        return _project_sorted(load_entry_rows(self.store), FULL_COLUMNS)


def _project_sorted(
    rows: list[dict[str, object]], columns: tuple[str, ...]
) -> list[Entry]:
    ordered = sorted(
        rows, key=lambda row: parse_timestamp(str(row["timestamp"])), reverse=True
    )
    return [entry_from_row(project_row(row, columns)) for row in ordered]
