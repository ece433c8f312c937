"""Domain models for tracked food entries."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import uuid4

FULL_COLUMNS = (
    "id",
    "user_id",
    "timestamp",
    "date",
    "time",
    "food_item",
    "calories",
    "protein",
    "carbs",
    "fat",
    "confidence",
    "image_url",
    "is_manual",
    "ingredients",
    "original_ai_response",
)
LITE_COLUMNS = tuple(
    column
    for column in FULL_COLUMNS
    if column not in {"user_id", "image_url", "original_ai_response"}
)
AGGREGATE_COLUMNS = ("date", "calories", "protein", "carbs", "fat")


@dataclass(frozen=True)
class Ingredient:
    """Single ingredient of an entry."""

    name: str
    grams: float
    calories: float


@dataclass(frozen=True)
class Entry:
    """One logged nutrition event."""

    id: str
    timestamp: str
    date: str
    time: str
    food_item: str
    calories: int
    protein: int = 0
    carbs: int = 0
    fat: int = 0
    confidence: float = 1.0
    user_id: str | None = None
    image_url: str | None = None
    is_manual: bool | None = None
    ingredients: list[Ingredient] = field(default_factory=list)
    original_ai_response: dict[str, object] | None = None

    def __post_init__(self) -> None:
        for name in ("calories", "protein", "carbs", "fat"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        try:
            day = date.fromisoformat(self.date)
        except ValueError as exc:
            raise ValueError(f"Invalid entry date: {self.date!r}") from exc
        instant = parse_timestamp(self.timestamp)
        # Local calendar days never drift more than one day from UTC.
        if abs((day - instant.astimezone(UTC).date()).days) > 1:
            raise ValueError(
                f"Entry date {self.date} is inconsistent with {self.timestamp}"
            )


@dataclass(frozen=True)
class EntryTotals:
    """Aggregate projection of an entry: date and macros only."""

    date: str
    calories: int
    protein: int
    carbs: int
    fat: int


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO instant, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def new_entry(  # noqa: PLR0913
    food_item: str,
    calories: int,
    *,
    protein: int = 0,
    carbs: int = 0,
    fat: int = 0,
    confidence: float = 1.0,
    logged_at: datetime | None = None,
    image_url: str | None = None,
    is_manual: bool | None = None,
    ingredients: list[Ingredient] | None = None,
    original_ai_response: dict[str, object] | None = None,
) -> Entry:
    """Create an entry whose date and time are derived from one instant."""
    instant = logged_at or datetime.now(tz=UTC).astimezone()
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return Entry(
        id=str(uuid4()),
        timestamp=instant.isoformat(),
        date=instant.date().isoformat(),
        time=instant.strftime("%H:%M"),
        food_item=food_item,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        confidence=confidence,
        image_url=image_url,
        is_manual=is_manual,
        ingredients=list(ingredients or []),
        original_ai_response=original_ai_response,
    )


def entry_to_row(entry: Entry) -> dict[str, object]:
    """Map an entry to its stored row shape."""
    return {
        "id": entry.id,
        "user_id": entry.user_id,
        "timestamp": entry.timestamp,
        "date": entry.date,
        "time": entry.time,
        "food_item": entry.food_item,
        "calories": entry.calories,
        "protein": entry.protein,
        "carbs": entry.carbs,
        "fat": entry.fat,
        "confidence": entry.confidence,
        "image_url": entry.image_url,
        "is_manual": entry.is_manual,
        "ingredients": [
            {"name": item.name, "grams": item.grams, "calories": item.calories}
            for item in entry.ingredients
        ],
        "original_ai_response": entry.original_ai_response,
    }


def entry_from_row(row: dict[str, object]) -> Entry:
    """Build an entry from a stored row, tolerating projected rows."""
    confidence = row.get("confidence")
    return Entry(
        id=str(row["id"]),
        user_id=_optional_str(row.get("user_id")),
        timestamp=str(row["timestamp"]),
        date=str(row["date"]),
        time=str(row.get("time") or ""),
        food_item=str(row.get("food_item") or ""),
        calories=int(row.get("calories") or 0),
        protein=int(row.get("protein") or 0),
        carbs=int(row.get("carbs") or 0),
        fat=int(row.get("fat") or 0),
        confidence=float(confidence) if confidence is not None else 1.0,
        image_url=_optional_str(row.get("image_url")),
        is_manual=row.get("is_manual"),
        ingredients=[
            Ingredient(
                name=str(item.get("name", "")),
                grams=float(item.get("grams") or 0.0),
                calories=float(item.get("calories") or 0.0),
            )
            for item in row.get("ingredients") or []
        ],
        original_ai_response=row.get("original_ai_response"),
    )


def totals_from_row(row: dict[str, object]) -> EntryTotals:
    """Build an aggregate projection from a stored row."""
    return EntryTotals(
        date=str(row["date"]),
        calories=int(row.get("calories") or 0),
        protein=int(row.get("protein") or 0),
        carbs=int(row.get("carbs") or 0),
        fat=int(row.get("fat") or 0),
    )


def project_row(row: dict[str, object], columns: tuple[str, ...]) -> dict[str, object]:
    """Keep only the given columns of a row."""
    return {column: row[column] for column in columns if column in row}


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
