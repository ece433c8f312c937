"""Pydantic models for API payloads."""

from datetime import datetime

from pydantic import BaseModel, Field

from snapcal.domain.models import AppMode
from snapcal.domain.profile import ActivityLevel, EquipmentAccess, Gender, Goal


class IngredientPayload(BaseModel):
    """Ingredient of a submitted entry."""

    name: str
    grams: float = Field(ge=0)
    calories: float = Field(ge=0)


class EntryPayload(BaseModel):
    """Entry submitted for saving. Supplying ``id`` replaces that entry."""

    id: str | None = None
    food_item: str
    calories: int = Field(ge=0)
    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fat: int = Field(default=0, ge=0)
    confidence: float = 1.0
    logged_at: datetime | None = None
    image_url: str | None = None
    is_manual: bool | None = None
    ingredients: list[IngredientPayload] = Field(default_factory=list)
    original_ai_response: dict[str, object] | None = None


class DailyGoalPayload(BaseModel):
    """Daily calorie goal."""

    daily_goal: int = Field(gt=0)


class ProfilePayload(BaseModel):
    """User profile attributes."""

    name: str | None = None
    height: float | None = Field(default=None, gt=0)
    weight: float | None = Field(default=None, gt=0)
    age: int | None = Field(default=None, gt=0)
    gender: Gender | None = None
    activity_level: ActivityLevel | None = None
    goal: Goal | None = None
    equipment_access: EquipmentAccess | None = None
    target_weight: float | None = Field(default=None, gt=0)


class SessionPayload(BaseModel):
    """Sign-in request."""

    email: str
    password: str | None = None


class ModePayload(BaseModel):
    """Requested storage mode."""

    mode: AppMode
