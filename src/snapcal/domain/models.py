"""Domain models for the SnapCal storage layer."""

from dataclasses import dataclass
from enum import StrEnum


class AppMode(StrEnum):
    """Storage backend selected for the process lifetime."""

    LOCAL = "local"
    CLOUD = "cloud"


@dataclass(frozen=True)
class UserIdentity:
    """Represents the signed-in user."""

    id: str
    email: str | None = None
