"""Supabase Auth token verification."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from pixelboard.errors import UnauthorizedError
from pixelboard.services.auth import TokenVerifier

logger = logging.getLogger(__name__)


@dataclass
class SupabaseTokenVerifier(TokenVerifier):
    """Checks access tokens against Supabase Auth."""

    client: Client

    def verify(self, token: str) -> UUID:
        """Return the Supabase user id for an access token."""
        try:
            response = self.client.auth.get_user(token)
        except AuthError as exc:
            logger.info("Rejected access token", extra={"reason": str(exc)})
            raise UnauthorizedError("Invalid or expired token") from exc
        if response is None or response.user is None:
            raise UnauthorizedError("Invalid or expired token")
        return UUID(str(response.user.id))
