"""Supabase repository for user profiles."""

from dataclasses import dataclass

from supabase import Client

from snapcal.adapters.supabase_errors import execute
from snapcal.domain.profile import UserProfile, profile_from_row, profile_to_row
from snapcal.services.profiles import ProfileRepository

PROFILES_TABLE = "user_profiles"
_PROFILE_COLUMNS = (
    "name, height, weight, age, gender, activity_level, goal, equipment_access, "
    "target_weight"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profiles, one row per user."""

    client: Client

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile row, if any."""
        response = execute(
            self.client.table(PROFILES_TABLE)
            .select(_PROFILE_COLUMNS)
            .eq("user_id", user_id)
            .limit(1),
            "read profile",
        )
        if not response.data:
            return None
        return profile_from_row(response.data[0])

    def save_profile(self, user_id: str, profile: UserProfile) -> None:
        """Upsert the user's profile row."""
        execute(
            self.client.table(PROFILES_TABLE).upsert(
                {"user_id": user_id, **profile_to_row(profile)},
                on_conflict="user_id",
            ),
            "save profile",
        )
