"""Tests for entry and summary domain helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from snapcal.domain.entries import (
    AGGREGATE_COLUMNS,
    LITE_COLUMNS,
    Entry,
    entry_from_row,
    entry_to_row,
    new_entry,
    project_row,
    totals_from_row,
)
from snapcal.domain.summaries import ArchivedSummary, summarize_day
from tests.conftest import make_entry


def test_new_entry_derives_local_date_and_time() -> None:
    tokyo = timezone(timedelta(hours=9))
    logged_at = datetime(2026, 10, 10, 1, 15, tzinfo=tokyo)
    entry = new_entry("Ramen", 800, logged_at=logged_at)

    assert entry.date == "2026-10-10"
    assert entry.time == "01:15"
    assert entry.timestamp.startswith("2026-10-10T01:15:00")
    assert entry.id


def test_naive_logged_at_is_treated_as_utc() -> None:
    entry = new_entry("Tea", 5, logged_at=datetime(2026, 10, 10, 23, 0))
    assert entry.timestamp == "2026-10-10T23:00:00+00:00"


@pytest.mark.parametrize(
    "overrides",
    [
        {"calories": -1},
        {"fat": -3},
        {"date": "10/10/2026"},
        {"date": "2026-10-14"},
    ],
)
def test_entry_rejects_invalid_values(overrides: dict[str, object]) -> None:
    row = {**entry_to_row(make_entry()), **overrides}
    with pytest.raises(ValueError):
        entry_from_row(row)


def test_lite_projection_roundtrip() -> None:
    entry = make_entry(
        "Pizza", 900, image_url="data:image/png", original_ai_response={"a": 1}
    )

    lite = entry_from_row(project_row(entry_to_row(entry), LITE_COLUMNS))

    assert lite.id == entry.id
    assert lite.calories == 900
    assert lite.image_url is None
    assert lite.user_id is None


def test_aggregate_projection() -> None:
    row = project_row(entry_to_row(make_entry(protein=12)), AGGREGATE_COLUMNS)

    assert set(row) == set(AGGREGATE_COLUMNS)
    assert totals_from_row(row).protein == 12


def test_summarize_day_and_archived_id() -> None:
    totals = [
        totals_from_row(entry_to_row(make_entry(calories=calories, carbs=10)))
        for calories in (100, 250)
    ]

    summary = summarize_day("2026-10-10", totals)
    archived = ArchivedSummary(
        user_id="user-1",
        date=summary.date,
        total_calories=summary.total_calories,
        total_protein=summary.total_protein,
        total_carbs=summary.total_carbs,
        total_fat=summary.total_fat,
    )

    assert summary.total_calories == 350
    assert summary.total_carbs == 20
    assert archived.id == "user-1_2026-10-10"
    assert archived.to_summary().archived


def test_entry_is_frozen() -> None:
    entry = make_entry()
    with pytest.raises(AttributeError):
        entry.calories = 1  # type: ignore[misc]
    assert isinstance(entry, Entry)
    assert datetime.fromisoformat(entry.timestamp).tzinfo == UTC
