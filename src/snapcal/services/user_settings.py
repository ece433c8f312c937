"""User settings service: daily goal and onboarding flag."""

import logging
from dataclasses import dataclass
from typing import Protocol

from snapcal.domain.errors import RemoteStorageError, StorageError
from snapcal.domain.profile import DEFAULT_DAILY_GOAL
from snapcal.services.cache import Cache, CacheKeys
from snapcal.services.users import UserService

_logger = logging.getLogger(__name__)


class UserSettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def get_daily_goal(self, user_id: str) -> int | None:
        """Return the user's daily goal if set."""

    def set_daily_goal(self, user_id: str, goal: int) -> None:
        """Persist the user's daily goal."""

    def get_onboarding_completed(self, user_id: str) -> bool:
        """Return True when the user finished onboarding."""

    def set_onboarding_completed(self, user_id: str) -> None:
        """Record that the user finished onboarding."""


@dataclass
class UserSettingsService:
    """Service for user settings.

    ``local_repository`` mirrors the onboarding flag on the device so it can
    be answered without a round trip in cloud mode.
    """

    repository: UserSettingsRepository
    user_service: UserService
    cache: Cache
    ttl_seconds: int = 600
    local_repository: UserSettingsRepository | None = None

    async def get_daily_goal(self) -> int:
        """Return the daily kcal goal, or the default when unset."""
        user = self.user_service.current_user()
        if user is None:
            return DEFAULT_DAILY_GOAL

        async def fetch() -> int:
            return self.repository.get_daily_goal(user.id) or DEFAULT_DAILY_GOAL

        try:
            return await self.cache.get_or_compute(
                CacheKeys.daily_goal(user.id), self.ttl_seconds, fetch
            )
        except RemoteStorageError as exc:
            _logger.warning("Daily goal unavailable: %s", exc.raw_message)
            return DEFAULT_DAILY_GOAL

    async def set_daily_goal(self, goal: int) -> None:
        """Persist the daily kcal goal."""
        if goal <= 0:
            raise ValueError("Daily goal must be positive")
        user = self.user_service.require_user()
        self.repository.set_daily_goal(user.id, goal)
        self.cache.invalidate(CacheKeys.daily_goal(user.id))

    async def has_completed_onboarding(self) -> bool:
        """Return True when the current user finished onboarding."""
        user = self.user_service.current_user()
        if user is None:
            return False
        local = self.local_repository
        if local is not None and local.get_onboarding_completed(user.id):
            return True
        try:
            completed = self.repository.get_onboarding_completed(user.id)
        except RemoteStorageError as exc:
            _logger.warning("Onboarding status unavailable: %s", exc.raw_message)
            return False
        if completed and local is not None:
            try:
                local.set_onboarding_completed(user.id)
            except StorageError as exc:
                _logger.warning("Could not mirror onboarding flag: %s", exc)
        return completed

    async def mark_onboarding_complete(self) -> None:
        """Record onboarding completion locally and in the active store."""
        user = self.user_service.require_user()
        if self.local_repository is not None:
            self.local_repository.set_onboarding_completed(user.id)
        self.repository.set_onboarding_completed(user.id)
