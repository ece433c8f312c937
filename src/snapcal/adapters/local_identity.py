"""Device-local session used when no cloud backend is active."""

import base64
from dataclasses import dataclass

from snapcal.adapters.local_storage import (
    SESSION_KEY,
    KeyValueStore,
    read_json,
    write_json,
)
from snapcal.domain.models import UserIdentity
from snapcal.services.users import IdentityProvider


@dataclass
class LocalIdentityProvider(IdentityProvider):
    """Keeps a single signed-in user on the device.

    The user id is derived from the lower-cased email, so signing in again
    with the same address finds the same local data.
    """

    store: KeyValueStore

    def current_user(self) -> UserIdentity | None:
        """Return the stored session user, if any."""
        data = read_json(self.store, SESSION_KEY, None)
        if not isinstance(data, dict) or not data.get("id"):
            return None
        return UserIdentity(id=str(data["id"]), email=data.get("email"))

    def sign_in(self, email: str, password: str | None = None) -> UserIdentity:
        """Start a local session for an email address."""
        normalized = email.strip().lower()
        if not normalized:
            raise ValueError("Email is required")
        user_id = base64.urlsafe_b64encode(normalized.encode("utf-8")).decode("ascii")
        user = UserIdentity(id=user_id, email=email.strip())
        write_json(self.store, SESSION_KEY, {"id": user.id, "email": user.email})
        return user

    def sign_out(self) -> None:
        """Remove the local session."""
        self.store.remove_item(SESSION_KEY)
