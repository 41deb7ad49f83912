"""
Input validators shared by the controllers.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from utils.errors import ValidationError

# local@domain.tld
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_ID = 1
MAX_ID = 2**31 - 1


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def is_present(value: Any) -> bool:
    """
    Presence check for a body field.

    ``None`` and empty strings count as absent; ``False`` and ``0`` do not.
    """
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def parse_id(raw: Any, message: str = "Invalid ID") -> int:
    """
    Parse a path/query/body id into an ``int`` or raise ``ValidationError``.

    Ids must fit the ``Integer`` primary-key columns (1 .. 2**31 - 1).
    """
    if isinstance(raw, bool):
        raise ValidationError(message)
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip(), 10)
        except (TypeError, ValueError):
            raise ValidationError(message)
    if not MIN_ID <= value <= MAX_ID:
        raise ValidationError(message)
    return value


def parse_optional_id(raw: Optional[str], message: str = "Invalid ID") -> Optional[int]:
    if raw is None or raw == "":
        return None
    return parse_id(raw, message)
