"""Domain models for user profiles and settings."""

from dataclasses import asdict, dataclass
from enum import StrEnum

DEFAULT_DAILY_GOAL = 2000


class Gender(StrEnum):
    """Gender used for energy estimates."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    """Self-reported activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    VERY = "very"
    EXTRA = "extra"


class Goal(StrEnum):
    """Body composition goal."""

    CUT = "cut"
    BULK = "bulk"
    MAINTAIN = "maintain"


class EquipmentAccess(StrEnum):
    """Training equipment available to the user."""

    GYM = "gym"
    HOME = "home"
    BODYWEIGHT = "bodyweight"


@dataclass(frozen=True)
class UserProfile:
    """Optional per-user attributes."""

    name: str | None = None
    height: float | None = None
    weight: float | None = None
    age: int | None = None
    gender: Gender | None = None
    activity_level: ActivityLevel | None = None
    goal: Goal | None = None
    equipment_access: EquipmentAccess | None = None
    target_weight: float | None = None


def profile_to_row(profile: UserProfile) -> dict[str, object]:
    """Map a profile to its stored row shape."""
    row = asdict(profile)
    for key, value in row.items():
        if isinstance(value, StrEnum):
            row[key] = value.value
    return row


def profile_from_row(row: dict[str, object]) -> UserProfile:
    """Build a profile from a stored row, ignoring unknown columns."""
    return UserProfile(
        name=_optional(row.get("name"), str),
        height=_optional(row.get("height"), float),
        weight=_optional(row.get("weight"), float),
        age=_optional(row.get("age"), int),
        gender=_optional(row.get("gender"), Gender),
        activity_level=_optional(row.get("activity_level"), ActivityLevel),
        goal=_optional(row.get("goal"), Goal),
        equipment_access=_optional(row.get("equipment_access"), EquipmentAccess),
        target_weight=_optional(row.get("target_weight"), float),
    )


def _optional(value: object, convert):  # type: ignore[no-untyped-def]
    if value is None or value == "":
        return None
    return convert(value)
