"""Domain models for daily rollups."""

from collections.abc import Iterable
from dataclasses import dataclass

from snapcal.domain.entries import EntryTotals


@dataclass(frozen=True)
class DailySummary:
    """Aggregate macros for one user and calendar day."""

    date: str
    total_calories: int
    total_protein: int
    total_carbs: int
    total_fat: int
    archived: bool = False


@dataclass(frozen=True)
class ArchivedSummary:
    """Rollup persisted by the archival sweep."""

    user_id: str
    date: str
    total_calories: int
    total_protein: int
    total_carbs: int
    total_fat: int

    @property
    def id(self) -> str:
        """Return the composite key of the rollup."""
        return f"{self.user_id}_{self.date}"

    def to_summary(self) -> DailySummary:
        """Return the rollup as a daily summary."""
        return DailySummary(
            date=self.date,
            total_calories=self.total_calories,
            total_protein=self.total_protein,
            total_carbs=self.total_carbs,
            total_fat=self.total_fat,
            archived=True,
        )


def summarize_day(day: str, entries: Iterable[EntryTotals]) -> DailySummary:
    """Sum the macros of one day's entries."""
    calories = protein = carbs = fat = 0
    for entry in entries:
        calories += entry.calories
        protein += entry.protein
        carbs += entry.carbs
        fat += entry.fat
    return DailySummary(
        date=day,
        total_calories=calories,
        total_protein=protein,
        total_carbs=carbs,
        total_fat=fat,
    )


def group_by_date(entries: Iterable[EntryTotals]) -> dict[str, list[EntryTotals]]:
    """Group entry totals by calendar day."""
    grouped: dict[str, list[EntryTotals]] = {}
    for entry in entries:
        grouped.setdefault(entry.date, []).append(entry)
    return grouped


def archived_from_row(row: dict[str, object]) -> ArchivedSummary:
    """Build an archived rollup from a stored row."""
    return ArchivedSummary(
        user_id=str(row["user_id"]),
        date=str(row["date"]),
        total_calories=int(row.get("total_calories") or 0),
        total_protein=int(row.get("total_protein") or 0),
        total_carbs=int(row.get("total_carbs") or 0),
        total_fat=int(row.get("total_fat") or 0),
    )


def archived_to_row(summary: ArchivedSummary) -> dict[str, object]:
    """Map an archived rollup to its stored row shape."""
    return {
        "id": summary.id,
        "user_id": summary.user_id,
        "date": summary.date,
        "total_calories": summary.total_calories,
        "total_protein": summary.total_protein,
        "total_carbs": summary.total_carbs,
        "total_fat": summary.total_fat,
    }
