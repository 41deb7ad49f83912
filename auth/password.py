"""
Password hashing and verification.

bcrypt with automatic salting; the work factor comes from
``config.bcrypt_rounds`` unless a caller passes ``rounds``.  bcrypt only
accepts up to 72 bytes of input, so registration rejects longer passwords
before they reach ``hash_password``.
"""

from __future__ import annotations

import bcrypt

from config.settings import config


def hash_password(password: str, rounds: int | None = None) -> str:
    if rounds is None:
        rounds = config.bcrypt_rounds
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored hash. A malformed hash counts as a mismatch."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False
