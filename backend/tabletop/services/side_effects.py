"""Helpers for side effects whose failure must not affect the caller."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def best_effort(awaitable: Awaitable[T], what: str) -> T | None:
    """Await *awaitable*; on failure log a warning and return None."""
    try:
        return await awaitable
    except Exception as e:
        logger.warning(f"Best-effort step failed ({what}): {type(e).__name__}: {e}")
        return None
