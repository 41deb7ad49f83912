"""
FastAPI dependencies for authentication.

Provides ``db_session`` and ``get_current_user`` dependencies that
are used across all protected routes.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import InvalidOrExpiredToken, claim_user_id, verify_token
from database.session import get_db_session
from utils.errors import Forbidden, Unauthenticated

logger = logging.getLogger(__name__)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def _token_from_header(authorization: Optional[str]) -> Optional[str]:
    """Second whitespace-separated segment of ``Authorization: Bearer <token>``."""
    if not authorization:
        return None
    parts = authorization.split()
    return parts[1] if len(parts) > 1 else None


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Dict[str, Any]:
    """
    Extract and verify the Bearer token, returning its decoded claims.

    A missing header or token segment answers 401; a token that fails
    verification answers 403, whatever scheme word precedes it.  The claims
    are also stored on ``request.state.user``.
    """
    token = _token_from_header(authorization)
    if token is None:
        raise Unauthenticated("Access denied. No token provided.")

    try:
        claims = verify_token(token)
    except InvalidOrExpiredToken as exc:
        logger.debug("Rejected token: %s", exc)
        raise Forbidden("Invalid or expired token.")

    request.state.user = claims
    return claims


def current_user_id(claims: Dict[str, Any]) -> Optional[int]:
    """User id carried by the authenticated caller's claims, if any."""
    return claim_user_id(claims) if claims else None
