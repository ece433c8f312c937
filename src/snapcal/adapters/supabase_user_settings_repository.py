"""Supabase repository for user settings."""

from dataclasses import dataclass

from supabase import Client

from snapcal.adapters.supabase_errors import execute
from snapcal.services.user_settings import UserSettingsRepository

SETTINGS_TABLE = "user_settings"


@dataclass
class SupabaseUserSettingsRepository(UserSettingsRepository):
    """Supabase implementation for user settings."""

    client: Client

    def get_daily_goal(self, user_id: str) -> int | None:
        """Return the stored daily goal for a user."""
        row = self._select(user_id, "daily_goal")
        if row is None or row.get("daily_goal") is None:
            return None
        return int(row["daily_goal"])

    def set_daily_goal(self, user_id: str, goal: int) -> None:
        """Upsert the user's daily goal."""
        execute(
            self.client.table(SETTINGS_TABLE).upsert(
                {"user_id": user_id, "daily_goal": goal}, on_conflict="user_id"
            ),
            "save daily goal",
        )

    def get_onboarding_completed(self, user_id: str) -> bool:
        """Return the stored onboarding flag."""
        row = self._select(user_id, "has_completed_onboarding")
        return bool(row and row.get("has_completed_onboarding"))

    def set_onboarding_completed(self, user_id: str) -> None:
        """Upsert the onboarding flag."""
        execute(
            self.client.table(SETTINGS_TABLE).upsert(
                {"user_id": user_id, "has_completed_onboarding": True},
                on_conflict="user_id",
            ),
            "save onboarding status",
        )

    def _select(self, user_id: str, columns: str) -> dict[str, object] | None:
        response = execute(
            self.client.table(SETTINGS_TABLE)
            .select(columns)
            .eq("user_id", user_id)
            .limit(1),
            "read settings",
        )
        if not response.data:
            return None
        return response.data[0]
