"""Game day cancellation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import discord

from shared.database import PERSISTENCE_ERRORS
from shared.models import GameDay, GameDayStatus
from shared.repositories import Repositories

from .announcements import refresh_game_day
from .channels import delete_private_category
from .events import EventError, delete_event, user_friendly_event_error
from .side_effects import best_effort

logger = logging.getLogger(__name__)


@dataclass
class CancelReport:
    game_day: GameDay
    caveats: list[str] = field(default_factory=list)


async def cancel_game_day(
    guild: discord.Guild, game_day: GameDay, repos: Repositories
) -> CancelReport | None:
    """Mark the game day cancelled, then tear down its Discord side effects.

    Returns None if the status change could not be stored. Cleanup failures
    never undo the cancellation; they are returned as caveats. Discord
    resources that are already gone are not reported.
    """
    try:
        updated = await repos.game_days.update(game_day.id, status=GameDayStatus.CANCELLED)
    except PERSISTENCE_ERRORS as e:
        logger.error(f"Failed to cancel game day {game_day.id}: {type(e).__name__}: {e}")
        return None
    if updated is None:
        return None
    logger.info(f"Game day {game_day.id} cancelled in guild {guild.id}")

    report = CancelReport(updated)

    if updated.announcement_message_id:
        refreshed = await best_effort(
            refresh_game_day(guild, updated, repos), "update cancelled announcement"
        )
        if not refreshed:
            report.caveats.append("The announcement message could not be updated.")

    if updated.discord_event_id:
        try:
            await delete_event(guild, updated.discord_event_id)
        except EventError as e:
            logger.warning(f"Could not delete event {updated.discord_event_id}: {e}")
            report.caveats.append(user_friendly_event_error(e))

    if updated.discord_category_id:
        deleted = await best_effort(
            delete_private_category(guild, updated.discord_category_id), "delete game day channels"
        )
        if deleted is None:
            report.caveats.append("The private channels could not be deleted.")

    return report
