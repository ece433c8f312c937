"""One-shot migration of local data into the cloud backend."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from snapcal.adapters.local_storage import DATA_KEYS, KeyValueStore
from snapcal.domain.entries import Entry
from snapcal.domain.errors import RemoteStorageError, SyncFailedError, WrongModeError
from snapcal.domain.models import AppMode
from snapcal.domain.profile import UserProfile
from snapcal.services.cache import Cache
from snapcal.services.entries import EntryRepository
from snapcal.services.profiles import ProfileRepository
from snapcal.services.user_settings import UserSettingsRepository
from snapcal.services.users import UserService

_logger = logging.getLogger(__name__)


class LocalEntrySource(Protocol):
    """Local entries as stored before any user mapping."""

    def list_all(self) -> list[Entry]:
        """Return every stored entry regardless of owner."""


class LocalSettingsSource(Protocol):
    """Local settings as stored before any user mapping."""

    def first_daily_goal(self) -> int | None:
        """Return the goal stored under the first user key, if any."""

    def any_onboarding_completed(self) -> bool:
        """Return True when any local user finished onboarding."""


class LocalProfileSource(Protocol):
    """Local profiles as stored before any user mapping."""

    def first_profile(self) -> UserProfile | None:
        """Return the profile stored under the first user key, if any."""


@dataclass(frozen=True)
class RemoteRepositories:
    """Cloud-side repositories a migration writes to."""

    entries: EntryRepository
    settings: UserSettingsRepository
    profiles: ProfileRepository


@dataclass(frozen=True)
class MigrationReport:
    """Outcome of a completed migration."""

    entries_uploaded: int
    daily_goal_synced: bool
    onboarding_synced: bool
    profile_synced: bool


@dataclass
class MigrationService:
    """Copies local entries, settings and profile to the cloud, then clears them.

    Entry upload is chunked and sequential. A failing chunk raises
    ``SyncFailedError`` with its starting offset; earlier chunks stay
    uploaded and a re-run upserts the same ids again. Local data is removed
    only after every step succeeded.
    """

    mode: AppMode
    user_service: UserService
    store: KeyValueStore
    cache: Cache
    local_entries: LocalEntrySource
    local_settings: LocalSettingsSource
    local_profiles: LocalProfileSource
    remote: RemoteRepositories | None = None
    chunk_size: int = 5

    def has_local_data(self) -> bool:
        """Return True when local entries are waiting to be migrated."""
        return bool(self.local_entries.list_all())

    async def migrate_local_to_remote(self) -> MigrationReport:
        """Upload all local data for the current cloud user."""
        remote = self.remote
        if self.mode is not AppMode.CLOUD or remote is None:
            raise WrongModeError("Switch to cloud mode before syncing local data.")
        user = self.user_service.require_user()

        entries = [
            replace(entry, user_id=user.id) for entry in self.local_entries.list_all()
        ]
        for offset in range(0, len(entries), self.chunk_size):
            chunk = entries[offset : offset + self.chunk_size]
            try:
                remote.entries.upsert_many(chunk)
            except RemoteStorageError as exc:
                _logger.error("Chunk upload failed at offset %s: %s", offset, exc)
                raise SyncFailedError(
                    offset, exc.raw_message or exc.message
                ) from exc

        goal = self.local_settings.first_daily_goal()
        if goal:
            remote.settings.set_daily_goal(user.id, goal)
        onboarded = self.local_settings.any_onboarding_completed()
        if onboarded:
            remote.settings.set_onboarding_completed(user.id)

        profile = self.local_profiles.first_profile()
        if profile is not None:
            remote.profiles.save_profile(user.id, profile)

        for key in DATA_KEYS:
            self.store.remove_item(key)
        self.cache.clear()
        _logger.info("Migrated %s local entries to the cloud", len(entries))
        return MigrationReport(
            entries_uploaded=len(entries),
            daily_goal_synced=bool(goal),
            onboarding_synced=onboarded,
            profile_synced=profile is not None,
        )
