"""Device-local repository for user settings."""

from dataclasses import dataclass

from snapcal.adapters.local_storage import (
    ONBOARDING_KEY,
    SETTINGS_KEY,
    KeyValueStore,
    read_json,
    write_json,
)
from snapcal.services.user_settings import UserSettingsRepository


@dataclass
class LocalUserSettingsRepository(UserSettingsRepository):
    """Daily goals keyed by user id, plus a separate onboarding flag map."""

    store: KeyValueStore

    def get_daily_goal(self, user_id: str) -> int | None:
        """Return the stored goal for a user."""
        goal = self._map(SETTINGS_KEY).get(user_id)
        return int(goal) if isinstance(goal, int | float) and goal else None

    def set_daily_goal(self, user_id: str, goal: int) -> None:
        """Persist the goal for a user."""
        settings = self._map(SETTINGS_KEY)
        settings[user_id] = goal
        write_json(self.store, SETTINGS_KEY, settings)

    def get_onboarding_completed(self, user_id: str) -> bool:
        """Return the stored onboarding flag."""
        return self._map(ONBOARDING_KEY).get(user_id) is True

    def set_onboarding_completed(self, user_id: str) -> None:
        """Store the onboarding flag."""
        flags = self._map(ONBOARDING_KEY)
        flags[user_id] = True
        write_json(self.store, ONBOARDING_KEY, flags)

    def first_daily_goal(self) -> int | None:
        """Return the goal stored under the first user key, if any."""
        for goal in self._map(SETTINGS_KEY).values():
            return int(goal) if isinstance(goal, int | float) and goal else None
        return None

    def any_onboarding_completed(self) -> bool:
        """Return True when any user key carries the onboarding flag."""
        return any(flag is True for flag in self._map(ONBOARDING_KEY).values())

    def _map(self, key: str) -> dict[str, object]:
        data = read_json(self.store, key, {})
        return data if isinstance(data, dict) else {}
