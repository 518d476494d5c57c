"""Game day RSVPs from announcement buttons and `/attend`."""

from __future__ import annotations

import logging
from collections.abc import Callable

import discord

from shared.database import PERSISTENCE_ERRORS
from shared.models.enums import AttendanceStatus
from shared.repositories import Repositories

from .. import messages
from ..interactions.intents import AttendanceIntent, Intent
from ..services.announcements import refresh_game_day
from ..services.roles import DiscordRoleGateway, RoleGateway
from ..services.status_sync import SyncOutcome, game_day_synchronizer
from .common import acknowledge, reply

logger = logging.getLogger(__name__)


class AttendanceButtonHandler:
    def __init__(
        self,
        repos: Repositories,
        roles_for: Callable[[discord.Guild], RoleGateway] = DiscordRoleGateway,
    ) -> None:
        self.repos = repos
        self.roles_for = roles_for

    def can_handle(self, intent: Intent) -> bool:
        return isinstance(intent, AttendanceIntent)

    async def handle(self, interaction: discord.Interaction, intent: AttendanceIntent) -> None:
        await record_attendance(
            interaction, self.repos, intent.subject_id, intent.status, self.roles_for
        )


async def record_attendance(
    interaction: discord.Interaction,
    repos: Repositories,
    game_day_id: str,
    status: AttendanceStatus,
    roles_for: Callable[[discord.Guild], RoleGateway] = DiscordRoleGateway,
) -> None:
    """Store the caller's RSVP and sync the game day role.

    Shared by the announcement buttons and ``/attend``.
    """
    await acknowledge(interaction)

    guild = interaction.guild
    if guild is None:
        await reply(interaction, messages.GUILD_ONLY)
        return

    actor_id = str(interaction.user.id)
    try:
        game_day = await repos.game_days.get(game_day_id)
    except PERSISTENCE_ERRORS as e:
        logger.error(f"Failed to load game day {game_day_id}: {e}")
        await reply(interaction, messages.STORAGE_ERROR)
        return

    if game_day is None:
        await reply(interaction, messages.GAME_DAY_NOT_FOUND)
        return
    if not game_day.accepts_rsvps:
        await reply(interaction, messages.GAME_DAY_CLOSED)
        return

    try:
        await repos.users.get_or_create(actor_id, interaction.user.name)
    except PERSISTENCE_ERRORS as e:
        logger.error(f"Failed to upsert user {actor_id}: {e}")
        await reply(interaction, messages.USER_ERROR)
        return

    sync = game_day_synchronizer(
        repos.attendances,
        roles_for(guild),
        on_change=lambda subject, _actor, _status: refresh_game_day(guild, subject, repos),
    )
    result = await sync.set_status(game_day, actor_id, status)

    if not result.saved:
        await reply(interaction, messages.STORAGE_ERROR)
        return

    text = messages.attendance_status_message(status, game_day.title)
    if result.outcome is SyncOutcome.ROLE_FAILED:
        text = f"{text}\n{messages.ROLE_SYNC_CAVEAT}"
    await reply(interaction, text)
