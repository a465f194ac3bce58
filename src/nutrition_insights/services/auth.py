"""Access token verification interface."""

from typing import Protocol
from uuid import UUID


class TokenVerifier(Protocol):
    """Resolves bearer tokens to user ids."""

    def verify(self, token: str) -> UUID | None:
        """Return the user id for a valid token, otherwise None."""
