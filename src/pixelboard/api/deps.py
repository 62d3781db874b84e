"""Request dependencies shared by routers."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import Header, Request

from pixelboard.errors import UnauthorizedError

if TYPE_CHECKING:
    from pixelboard.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Resolve the bearer token on the request to a user id."""
    if not authorization:
        raise UnauthorizedError("Access token required")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Access token required")
    container = get_container(request)
    return container.token_verifier.verify(token.strip())
