"""Bearer token authentication dependency."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import Header, HTTPException, Request, status

if TYPE_CHECKING:
    from nutrition_insights.containers import AppContainer

_BEARER_PREFIX = "bearer "


async def require_user_id(
    request: Request,
    authorization: str | None = Header(default=None),
) -> UUID:
    """Resolve the authenticated user id from the Authorization header."""
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required"
        )
    token = authorization[len(_BEARER_PREFIX) :].strip()
    container: AppContainer = request.app.state.container
    user_id = container.token_verifier.verify(token) if token else None
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        )
    return user_id
