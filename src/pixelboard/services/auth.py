"""Bearer token verification interface."""

from typing import Protocol
from uuid import UUID


class TokenVerifier(Protocol):
    """Resolves a bearer token to the id of the user who holds it."""

    def verify(self, token: str) -> UUID:
        """Return the user id or raise ``UnauthorizedError``."""
