"""Daily rollups and the archival sweep."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Protocol

from snapcal.domain.entries import EntryTotals
from snapcal.domain.errors import RemoteStorageError, StorageError
from snapcal.domain.summaries import (
    ArchivedSummary,
    DailySummary,
    group_by_date,
    summarize_day,
)
from snapcal.services.cache import Cache, CacheKeys
from snapcal.services.users import UserService

_logger = logging.getLogger(__name__)


class SummaryRepository(Protocol):
    """Storage backend for rollups and aggregate entry reads."""

    def list_entry_totals(
        self, user_id: str, before: str | None = None
    ) -> list[EntryTotals]:
        """Return aggregate rows of live entries, optionally before a date."""

    def list_archived(self, user_id: str) -> list[ArchivedSummary]:
        """Return the user's archived rollups."""

    def upsert_archived(self, summary: ArchivedSummary) -> None:
        """Insert or replace an archived rollup keyed by user and date."""

    def delete_entries_for_date(self, user_id: str, day: str) -> None:
        """Delete the user's live entries for a date."""


@dataclass
class ArchiveReport:
    """Outcome of an archival sweep."""

    archived: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class SummaryService:
    """Service computing daily summaries and compacting old entries."""

    repository: SummaryRepository
    user_service: UserService
    cache: Cache
    ttl_seconds: int = 180
    retention_days: int = 7

    async def summaries_lite(self) -> list[DailySummary]:
        """Return per-day totals, newest first.

        Live entries win over an archived rollup for the same date, so a
        sweep interrupted between its upsert and delete never double counts.
        """
        user = self.user_service.current_user()
        if user is None:
            return []

        async def compute() -> list[DailySummary]:
            return self._compute(user.id)

        try:
            return await self.cache.get_or_compute(
                CacheKeys.summaries_lite(user.id), self.ttl_seconds, compute
            )
        except RemoteStorageError as exc:
            _logger.warning("Summaries unavailable (%s): %s", exc.kind, exc.raw_message)
            return []

    async def archive_older_than(
        self, retention_days: int | None = None, today: date | None = None
    ) -> ArchiveReport:
        """Roll up and delete live entries older than the retention window.

        Best effort: a date that fails is logged and left for the next run.
        """
        report = ArchiveReport()
        user = self.user_service.current_user()
        if user is None:
            return report
        days = self.retention_days if retention_days is None else retention_days
        if days < 0:
            raise ValueError("retention_days must not be negative")
        threshold = ((today or date.today()) - timedelta(days=days)).isoformat()
        try:
            old_entries = self.repository.list_entry_totals(user.id, before=threshold)
        except StorageError:
            _logger.exception("Archival read failed for entries before %s", threshold)
            return report

        for day, day_entries in sorted(group_by_date(old_entries).items()):
            totals = summarize_day(day, day_entries)
            rollup = ArchivedSummary(
                user_id=user.id,
                date=day,
                total_calories=totals.total_calories,
                total_protein=totals.total_protein,
                total_carbs=totals.total_carbs,
                total_fat=totals.total_fat,
            )
            try:
                self.repository.upsert_archived(rollup)
                self.repository.delete_entries_for_date(user.id, day)
            except StorageError as exc:
                _logger.warning("Skipping archival of %s: %s", day, exc)
                report.skipped.append(day)
                continue
            report.archived.append(day)

        if report.archived or report.skipped:
            self.cache.invalidate_pattern(CacheKeys.food_pattern(user.id))
        if report.archived:
            _logger.info(
                "Archived %s day(s) older than %s", len(report.archived), threshold
            )
        return report

    def _compute(self, user_id: str) -> list[DailySummary]:
        live = {
            day: summarize_day(day, entries)
            for day, entries in group_by_date(
                self.repository.list_entry_totals(user_id)
            ).items()
        }
        try:
            archived = self.repository.list_archived(user_id)
        except RemoteStorageError as exc:
            _logger.warning("Archived summaries unavailable: %s", exc.raw_message)
            archived = []

        merged = {item.date: item.to_summary() for item in archived}
        merged.update(live)
        return sorted(merged.values(), key=lambda item: item.date, reverse=True)
