"""Supabase Auth token verification."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutrition_insights.services.auth import TokenVerifier

logger = logging.getLogger(__name__)


@dataclass
class SupabaseTokenVerifier(TokenVerifier):
    """Verifies access tokens against Supabase Auth."""

    client: Client

    def verify(self, token: str) -> UUID | None:
        """Return the authenticated user id, or None when the token is rejected."""
        try:
            response = self.client.auth.get_user(token)
        except Exception as exc:
            logger.warning("Token verification failed: %s", type(exc).__name__)
            return None
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))
