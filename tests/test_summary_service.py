"""Tests for daily summaries and the archival sweep."""

import asyncio
from datetime import date

import pytest

from snapcal.adapters.local_entry_repository import LocalEntryRepository
from snapcal.adapters.local_summary_repository import LocalSummaryRepository
from snapcal.adapters.supabase_entry_repository import (
    ENTRIES_TABLE,
    SupabaseEntryRepository,
)
from snapcal.adapters.supabase_summary_repository import (
    SUMMARIES_TABLE,
    SupabaseSummaryRepository,
)
from snapcal.domain.summaries import ArchivedSummary, DailySummary
from snapcal.services.cache import CacheKeys, InMemoryCache
from snapcal.services.entries import EntryService
from snapcal.services.summaries import SummaryService
from snapcal.services.users import UserService
from tests.conftest import (
    FakeAPIError,
    FakeSupabaseClient,
    InMemoryKeyValueStore,
    StaticIdentityProvider,
    make_entry,
)

TODAY = date(2026, 10, 18)


def _local_services(
    store: InMemoryKeyValueStore, identity: StaticIdentityProvider
) -> tuple[EntryService, SummaryService]:
    cache = InMemoryCache()
    user_service = UserService(identity)
    entries = EntryService(LocalEntryRepository(store), user_service, cache)
    summaries = SummaryService(LocalSummaryRepository(store), user_service, cache)
    return entries, summaries


def _seed(entries: EntryService) -> None:
    for food, calories, protein, day, hour in (
        ("Oats", 300, 10, "2026-10-01", 8),
        ("Steak", 700, 50, "2026-10-01", 19),
        ("Eggs", 200, 14, "2026-10-05", 9),
        ("Salad", 350, 8, "2026-10-15", 13),
        ("Curry", 650, 30, "2026-10-17", 20),
    ):
        entry = make_entry(food, calories, protein=protein, day=day, hour=hour)
        asyncio.run(entries.save(entry))


def test_summaries_sum_live_entries_per_day(store, identity) -> None:
    entries, summaries = _local_services(store, identity)
    _seed(entries)

    result = asyncio.run(summaries.summaries_lite())

    assert [item.date for item in result] == [
        "2026-10-17",
        "2026-10-15",
        "2026-10-05",
        "2026-10-01",
    ]
    assert result[-1] == DailySummary(
        date="2026-10-01",
        total_calories=1000,
        total_protein=60,
        total_carbs=0,
        total_fat=0,
    )


def test_archival_preserves_summaries(store, identity) -> None:
    entries, summaries = _local_services(store, identity)
    _seed(entries)
    before = asyncio.run(summaries.summaries_lite())

    report = asyncio.run(summaries.archive_older_than(today=TODAY))

    assert report.archived == ["2026-10-01", "2026-10-05"]
    assert report.skipped == []
    remaining = asyncio.run(entries.list_entries())
    assert {entry.date for entry in remaining} == {"2026-10-15", "2026-10-17"}

    after = asyncio.run(summaries.summaries_lite())
    assert [
        (item.date, item.total_calories, item.total_protein) for item in after
    ] == [(item.date, item.total_calories, item.total_protein) for item in before]
    assert [item.archived for item in after] == [False, False, True, True]


def test_archival_threshold_is_exclusive(store, identity) -> None:
    entries, summaries = _local_services(store, identity)
    asyncio.run(entries.save(make_entry("Edge", 100, day="2026-10-11")))
    asyncio.run(entries.save(make_entry("Old", 100, day="2026-10-10")))

    report = asyncio.run(summaries.archive_older_than(retention_days=7, today=TODAY))

    assert report.archived == ["2026-10-10"]
    assert [entry.food_item for entry in asyncio.run(entries.list_entries())] == [
        "Edge"
    ]


def test_rerun_archival_is_a_noop(store, identity) -> None:
    entries, summaries = _local_services(store, identity)
    _seed(entries)
    asyncio.run(summaries.archive_older_than(today=TODAY))

    report = asyncio.run(summaries.archive_older_than(today=TODAY))

    assert report.archived == []
    assert len(asyncio.run(summaries.summaries_lite())) == 4


def test_live_entries_override_archived_rollup(store, identity, user) -> None:
    entries, summaries = _local_services(store, identity)
    asyncio.run(entries.save(make_entry("Late snack", 150, day="2026-10-01")))
    LocalSummaryRepository(store).upsert_archived(
        ArchivedSummary(
            user_id=user.id,
            date="2026-10-01",
            total_calories=150,
            total_protein=0,
            total_carbs=0,
            total_fat=0,
        )
    )

    result = asyncio.run(summaries.summaries_lite())

    assert len(result) == 1
    assert result[0].total_calories == 150
    assert result[0].archived is False


def test_archival_invalidates_entry_caches(store, identity, user) -> None:
    entries, summaries = _local_services(store, identity)
    _seed(entries)
    asyncio.run(entries.list_entries())
    asyncio.run(summaries.summaries_lite())

    asyncio.run(summaries.archive_older_than(today=TODAY))

    keys = summaries.cache.keys()
    assert CacheKeys.entries(user.id) not in keys
    assert CacheKeys.summaries_lite(user.id) not in keys


def test_signed_out_sweep_does_nothing(store, identity) -> None:
    entries, summaries = _local_services(store, identity)
    _seed(entries)
    identity.user = None

    report = asyncio.run(summaries.archive_older_than(today=TODAY))

    assert report.archived == []
    assert asyncio.run(summaries.summaries_lite()) == []


def _remote_services(
    client: FakeSupabaseClient, identity: StaticIdentityProvider
) -> tuple[EntryService, SummaryService]:
    cache = InMemoryCache()
    user_service = UserService(identity)
    entries = EntryService(SupabaseEntryRepository(client), user_service, cache)
    summaries = SummaryService(SupabaseSummaryRepository(client), user_service, cache)
    return entries, summaries


def test_remote_archival_moves_rows_into_summaries(
    supabase_client, identity, user
) -> None:
    entries, summaries = _remote_services(supabase_client, identity)
    _seed(entries)

    report = asyncio.run(summaries.archive_older_than(today=TODAY))

    assert report.archived == ["2026-10-01", "2026-10-05"]
    archived = {row["id"]: row for row in supabase_client.rows(SUMMARIES_TABLE)}
    assert archived[f"{user.id}_2026-10-01"]["total_calories"] == 1000
    assert {row["date"] for row in supabase_client.rows(ENTRIES_TABLE)} == {
        "2026-10-15",
        "2026-10-17",
    }
    aggregate_reads = [
        query
        for query in supabase_client.tables[ENTRIES_TABLE].queries
        if query["action"] == "select"
    ]
    assert aggregate_reads[-1]["columns"] == [
        "date",
        "calories",
        "protein",
        "carbs",
        "fat",
    ]


def test_remote_archive_failure_keeps_live_entries(
    supabase_client, identity
) -> None:
    entries, summaries = _remote_services(supabase_client, identity)
    _seed(entries)
    supabase_client.table(SUMMARIES_TABLE)
    supabase_client.tables[SUMMARIES_TABLE].error = FakeAPIError(
        "new row violates row-level security policy", code="42501"
    )

    report = asyncio.run(summaries.archive_older_than(today=TODAY))

    assert report.archived == []
    assert report.skipped == ["2026-10-01", "2026-10-05"]
    assert len(supabase_client.rows(ENTRIES_TABLE)) == 5
    totals = asyncio.run(summaries.summaries_lite())
    assert sum(item.total_calories for item in totals) == 2200


def test_negative_retention_is_rejected(store, identity) -> None:
    entries, summaries = _local_services(store, identity)
    asyncio.run(entries.save(make_entry("Today", 100, day="2026-10-18")))

    with pytest.raises(ValueError):
        asyncio.run(summaries.archive_older_than(retention_days=-1, today=TODAY))

    assert len(asyncio.run(entries.list_entries())) == 1
