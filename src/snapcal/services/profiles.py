"""Profile service."""

import logging
from dataclasses import dataclass
from typing import Protocol

from snapcal.domain.errors import RemoteStorageError
from snapcal.domain.profile import UserProfile
from snapcal.services.cache import Cache, CacheKeys
from snapcal.services.users import UserService

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile, if any."""

    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        """Insert or replace the user's profile."""


@dataclass
class ProfileService:
    """Cached access to the current user's profile."""

    repository: ProfileRepository
    user_service: UserService
    cache: Cache
    ttl_seconds: int = 600

    async def get_profile(self) -> UserProfile | None:
        user = self.user_service.current_user()
        if user is None:
            return None

        async def fetch() -> UserProfile | None:
            return self.repository.get_profile(user.id)

        try:
            return await self.cache.get_or_compute(
                CacheKeys.profile(user.id), self.ttl_seconds, fetch
            )
        except RemoteStorageError as exc:
            _logger.warning("Profile unavailable: %s", exc.raw_message)
            return None

    async def save_profile(self, profile: UserProfile) -> None:
        user = self.user_service.require_user()
        self.repository.save_profile(user.id, profile)
        self.cache.invalidate(CacheKeys.profile(user.id))
