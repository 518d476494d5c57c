"""Discord scheduled events for game days."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum

import discord

logger = logging.getLogger(__name__)

EVENT_DURATION = timedelta(hours=4)


class EventErrorCode(str, Enum):
    MISSING_PERMISSIONS = "MISSING_PERMISSIONS"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_SCHEDULED_TIME = "INVALID_SCHEDULED_TIME"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class EventError(Exception):
    def __init__(self, code: EventErrorCode, message: str, original: BaseException | None = None):
        super().__init__(message)
        self.code = code
        self.original = original


_FRIENDLY_MESSAGES = {
    EventErrorCode.MISSING_PERMISSIONS: (
        "The bot does not have permission to manage scheduled events. "
        'Please give it the "Manage Events" permission.'
    ),
    EventErrorCode.EVENT_NOT_FOUND: (
        "The scheduled event could not be found. It may have been deleted already."
    ),
    EventErrorCode.INVALID_SCHEDULED_TIME: (
        "Invalid scheduled time. Events must be scheduled in the future."
    ),
}


def user_friendly_event_error(error: EventError) -> str:
    return _FRIENDLY_MESSAGES.get(
        error.code,
        "An unknown error occurred while managing the scheduled event. "
        "Please check the logs for more details.",
    )


def _wrap(e: discord.HTTPException, action: str) -> EventError:
    if isinstance(e, discord.Forbidden):
        return EventError(EventErrorCode.MISSING_PERMISSIONS, f"Missing permissions to {action}", e)
    if isinstance(e, discord.NotFound):
        return EventError(EventErrorCode.EVENT_NOT_FOUND, f"Event not found while trying to {action}", e)
    return EventError(EventErrorCode.UNKNOWN_ERROR, f"Failed to {action}: {e}", e)


async def create_game_day_event(
    guild: discord.Guild,
    *,
    name: str,
    start: datetime,
    location: str | None,
    description: str | None = None,
) -> discord.ScheduledEvent:
    """Create an external, guild-only event. Raises EventError."""
    if start <= datetime.now(timezone.utc):
        raise EventError(EventErrorCode.INVALID_SCHEDULED_TIME, "Event start is in the past")
    try:
        event = await guild.create_scheduled_event(
            name=name[:100],
            start_time=start,
            end_time=start + EVENT_DURATION,
            entity_type=discord.EntityType.external,
            privacy_level=discord.PrivacyLevel.guild_only,
            location=(location or "TBD")[:100],
            description=(description or "")[:1000],
            reason="Game day scheduled",
        )
    except discord.HTTPException as e:
        raise _wrap(e, "create scheduled event") from e
    logger.info(f"Created scheduled event {event.id} in guild {guild.id}")
    return event


async def fetch_event(guild: discord.Guild, event_id: str) -> discord.ScheduledEvent | None:
    """The event, or None if Discord no longer has it. Raises EventError."""
    try:
        return await guild.fetch_scheduled_event(int(event_id))
    except discord.NotFound:
        logger.warning(f"Scheduled event {event_id} not found")
        return None
    except discord.HTTPException as e:
        raise _wrap(e, "fetch scheduled event") from e


async def delete_event(guild: discord.Guild, event_id: str) -> bool:
    """Delete the event. False if it was already gone. Raises EventError."""
    event = await fetch_event(guild, event_id)
    if event is None:
        return False
    try:
        await event.delete(reason="Game day cancelled")
    except discord.HTTPException as e:
        raise _wrap(e, "delete scheduled event") from e
    logger.info(f"Deleted scheduled event {event_id}")
    return True


async def link_announcement(guild: discord.Guild, event_id: str, message_url: str) -> None:
    """Append the announcement link to the event description."""
    event = await fetch_event(guild, event_id)
    if event is None:
        raise EventError(EventErrorCode.EVENT_NOT_FOUND, f"Event {event_id} not found")
    description = event.description or ""
    if message_url in description:
        return
    line = f"RSVP here: {message_url}"
    try:
        await event.edit(description=f"{description}\n\n{line}".strip()[:1000])
    except discord.HTTPException as e:
        raise _wrap(e, "edit scheduled event") from e
