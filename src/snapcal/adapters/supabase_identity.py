"""Supabase Auth identity provider."""

import logging
from dataclasses import dataclass

from supabase import Client

from snapcal.domain.errors import NotAuthenticatedError
from snapcal.domain.models import UserIdentity
from snapcal.services.users import IdentityProvider

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Reads the user from the Supabase client's auth session."""

    client: Client

    def current_user(self) -> UserIdentity | None:
        """Return the session user, or None without a valid session."""
        try:
            response = self.client.auth.get_user()
        except Exception as exc:  # noqa: BLE001
            _logger.info("No Supabase session: %s", exc)
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        return UserIdentity(id=str(user.id), email=user.email)

    def sign_in(self, email: str, password: str | None = None) -> UserIdentity:
        """Sign in with email and password."""
        if not password:
            raise ValueError("Password is required for cloud sign-in")
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as exc:
            raise NotAuthenticatedError(f"Sign-in failed: {exc}") from exc
        if response.user is None:
            raise NotAuthenticatedError("Sign-in failed.")
        return UserIdentity(id=str(response.user.id), email=response.user.email)

    def sign_out(self) -> None:
        """End the Supabase session."""
        self.client.auth.sign_out()
