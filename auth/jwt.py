"""
JWT creation and verification.

Tokens are HS256-signed JWTs carrying ``{userId, email, iat, exp}``.
Secret and lifetime come from ``config.jwt_secret`` / ``config.jwt_expiry_seconds``
(env vars ``JWT_SECRET`` / ``JWT_EXPIRY_SECONDS``).

Tokens are stateless: there is no revocation list, so a token stays valid
until it expires even after the client "logs out".
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import jwt

from config.settings import config
from utils.errors import ValidationError
from utils.validators import parse_id


class InvalidOrExpiredToken(Exception):
    """Signature, structure or expiry check failed."""


def create_token(user_id: int, email: str, ttl: Optional[int] = None) -> str:
    """Create a signed token for ``user_id`` valid for ``ttl`` seconds."""
    now = int(time.time())
    payload = {
        "userId": user_id,
        "email": email,
        "iat": now,
        "exp": now + (ttl if ttl is not None else config.jwt_expiry_seconds),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify ``token`` and return its claims.

    Raises ``InvalidOrExpiredToken`` on a bad signature, malformed token or
    elapsed expiry.
    """
    try:
        return jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidOrExpiredToken(str(exc)) from exc


def claim_user_id(claims: Dict[str, Any]) -> Optional[int]:
    """
    Read the user id from token claims.

    Tokens are issued with ``userId``; the older ``id`` key is still read so
    previously issued tokens keep working.
    """
    raw = claims.get("userId")
    if raw is None:
        raw = claims.get("id")
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return parse_id(raw)
    except ValidationError:
        return None
