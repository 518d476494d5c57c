"""Shape checks for values read back out of custom IDs and modals."""

from __future__ import annotations

import re
from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound=Enum)

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)
_SNOWFLAKE_RE = re.compile(r"[0-9]{17,19}")


def is_uuid(value: object) -> bool:
    """Persistence identifiers are canonical 36-character UUID strings."""
    return isinstance(value, str) and bool(_UUID_RE.fullmatch(value))


def is_discord_id(value: object) -> bool:
    """Discord snowflakes are 17-19 decimal digits."""
    return isinstance(value, str) and bool(_SNOWFLAKE_RE.fullmatch(value))


def parse_enum(enum_cls: type[E], value: object) -> E | None:
    """Return the member whose value is *value*, or None."""
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None
