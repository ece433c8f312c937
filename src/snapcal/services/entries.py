"""Entry service: cached CRUD over the active entry store."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol

from snapcal.domain.entries import FULL_COLUMNS, LITE_COLUMNS, Entry
from snapcal.domain.errors import RemoteStorageError
from snapcal.services.cache import Cache, CacheKeys
from snapcal.services.users import UserService

_logger = logging.getLogger(__name__)


class EntryRepository(Protocol):
    """Storage backend for food entries."""

    def upsert(self, entry: Entry) -> None:
        """Insert or fully replace an entry by id."""

    def upsert_many(self, entries: list[Entry]) -> None:
        """Insert or replace several entries in one write."""

    def list_entries(self, user_id: str, columns: tuple[str, ...]) -> list[Entry]:
        """Return a user's entries, newest first, with the given projection."""

    def list_for_date(self, user_id: str, day: str) -> list[Entry]:
        """Return a user's lite entries for one date, newest first."""

    def get_image(self, user_id: str, entry_id: str) -> str | None:
        """Return the image of an entry owned by the user."""

    def delete(self, user_id: str, entry_id: str) -> None:
        """Delete an entry owned by the user; missing ids are ignored."""


@dataclass
class EntryService:
    """Service for saving and reading the current user's entries."""

    repository: EntryRepository
    user_service: UserService
    cache: Cache
    ttl_seconds: int = 180

    async def save(self, entry: Entry) -> Entry:
        """Upsert an entry for the current user."""
        user = self.user_service.require_user()
        owned = replace(entry, user_id=user.id)
        self.repository.upsert(owned)
        self.cache.invalidate_pattern(CacheKeys.food_pattern(user.id))
        return owned

    async def list_entries(self) -> list[Entry]:
        """Return full entries, newest first."""
        return await self._list_cached(FULL_COLUMNS, CacheKeys.entries)

    async def list_entries_lite(self) -> list[Entry]:
        """Return entries without images or AI snapshots, newest first."""
        return await self._list_cached(LITE_COLUMNS, CacheKeys.entries_lite)

    async def list_for_date(self, day: str) -> list[Entry]:
        """Return lite entries for one date, newest first."""
        user = self.user_service.current_user()
        if user is None:
            return []
        try:
            return self.repository.list_for_date(user.id, day)
        except RemoteStorageError as exc:
            _logger.warning("Entries for %s unavailable: %s", day, exc.raw_message)
            return []

    async def get_image(self, entry_id: str) -> str | None:
        """Return the image of one of the current user's entries."""
        user = self.user_service.current_user()
        if user is None:
            return None

        async def fetch() -> str | None:
            return self.repository.get_image(user.id, entry_id)

        try:
            return await self.cache.get_or_compute(
                CacheKeys.entry_image(user.id, entry_id), self.ttl_seconds, fetch
            )
        except RemoteStorageError as exc:
            _logger.warning("Image %s unavailable: %s", entry_id, exc.raw_message)
            return None

    async def delete(self, entry_id: str) -> None:
        """Delete one of the current user's entries if it exists."""
        user = self.user_service.require_user()
        self.repository.delete(user.id, entry_id)
        self.cache.invalidate_pattern(CacheKeys.food_pattern(user.id))

    async def _list_cached(
        self, columns: tuple[str, ...], key_for: Callable[[str], str]
    ) -> list[Entry]:
        user = self.user_service.current_user()
        if user is None:
            return []

        async def fetch() -> list[Entry]:
            return self.repository.list_entries(user.id, columns)

        try:
            return await self.cache.get_or_compute(
                key_for(user.id), self.ttl_seconds, fetch
            )
        except RemoteStorageError as exc:
            # Keep list views renderable; nothing is cached on failure.
            _logger.warning(
                "Entry list unavailable (%s): %s", exc.kind, exc.raw_message
            )
            return []
