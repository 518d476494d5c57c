"""Parsing of user-entered game day times."""

from __future__ import annotations

import re
from datetime import datetime, timezone, tzinfo

DATE_TIME_FORMAT = "%Y-%m-%d %H:%M"
_DATE_TIME_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}")


def parse_date_time(text: str, tz: tzinfo) -> datetime | None:
    """Parse ``YYYY-MM-DD HH:MM`` as a wall-clock time in *tz*.

    Returns None for anything malformed or out of range (e.g. 2025-02-30).
    """
    text = text.strip()
    if not _DATE_TIME_RE.fullmatch(text):
        return None
    try:
        naive = datetime.strptime(text, DATE_TIME_FORMAT)
    except ValueError:
        return None
    return naive.replace(tzinfo=tz)


def is_future(when: datetime, now: datetime | None = None) -> bool:
    return when > (now or datetime.now(timezone.utc))
