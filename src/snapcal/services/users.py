"""Current-user lookup for the storage layer."""

from dataclasses import dataclass
from typing import Protocol

from snapcal.domain.errors import NotAuthenticatedError
from snapcal.domain.models import UserIdentity


class IdentityProvider(Protocol):
    """Source of the signed-in user."""

    def current_user(self) -> UserIdentity | None:
        """Return the signed-in user, if any."""

    def sign_in(self, email: str, password: str | None = None) -> UserIdentity:
        """Start a session and return its user."""

    def sign_out(self) -> None:
        """End the current session."""


@dataclass
class UserService:
    """Application service scoping reads and writes to the current user."""

    identity: IdentityProvider

    def current_user(self) -> UserIdentity | None:
        """Return the signed-in user, if any."""
        return self.identity.current_user()

    def is_authenticated(self) -> bool:
        """Return True when a user is signed in."""
        return self.current_user() is not None

    def require_user(self) -> UserIdentity:
        """Return the signed-in user or raise ``NotAuthenticatedError``."""
        user = self.current_user()
        if user is None:
            raise NotAuthenticatedError()
        return user
