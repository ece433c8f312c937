"""Device-local repository for user profiles."""

from dataclasses import dataclass

from snapcal.adapters.local_storage import (
    PROFILE_KEY,
    KeyValueStore,
    read_json,
    write_json,
)
from snapcal.domain.profile import UserProfile, profile_from_row, profile_to_row
from snapcal.services.profiles import ProfileRepository


@dataclass
class LocalProfileRepository(ProfileRepository):
    """Profiles keyed by user id in one JSON object."""

    store: KeyValueStore

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the stored profile for a user."""
        row = self._profiles().get(user_id)
        return profile_from_row(row) if isinstance(row, dict) else None

    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        """Insert or replace the profile for a user."""
        profiles = self._profiles()
        profiles[user_id] = profile_to_row(profile)
        write_json(self.store, PROFILE_KEY, profiles)

    def first_profile(self) -> UserProfile | None:
        """Return the profile stored under the first user key, if any."""
        for row in self._profiles().values():
            return profile_from_row(row) if isinstance(row, dict) else None
        return None

    def _profiles(self) -> dict[str, object]:
        data = read_json(self.store, PROFILE_KEY, {})
        return data if isinstance(data, dict) else {}
