"""Submission of the schedule game day modal.

A successful submission creates, in order: a game day role, the game day
record, a private category, a Discord scheduled event, the host's RSVP and
the announcement. Only the role and the record are required; every later
step is best effort and reported to the host as a caveat.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import tzinfo
from typing import Any

import discord

from shared.database import PERSISTENCE_ERRORS
from shared.models.enums import AttendanceStatus
from shared.repositories import Repositories

from .. import messages
from ..embeds import game_day_embed
from ..interactions.intents import Intent, ModalIntent, ModalKind, ScheduleGameDayPayload
from ..interactions.modals import submitted_values
from ..services.announcements import post_game_day, scheduling_channel
from ..services.channels import GAME_DAY_CHANNELS, create_private_category
from ..services.events import (
    EventError,
    create_game_day_event,
    link_announcement,
    user_friendly_event_error,
)
from ..services.roles import DiscordRoleGateway, RoleGateway, create_role, game_day_role_name
from ..services.scheduling import is_future, parse_date_time
from ..services.side_effects import best_effort
from ..services.status_sync import SyncOutcome, game_day_synchronizer
from .common import acknowledge, reply, with_caveats

logger = logging.getLogger(__name__)


class ScheduleGameDayHandler:
    def __init__(
        self,
        repos: Repositories,
        tz: tzinfo,
        roles_for: Callable[[discord.Guild], RoleGateway] = DiscordRoleGateway,
    ) -> None:
        self.repos = repos
        self.tz = tz
        self.roles_for = roles_for

    def can_handle(self, intent: Intent) -> bool:
        return isinstance(intent, ModalIntent) and intent.modal is ModalKind.SCHEDULE_GAME_DAY

    async def handle(self, interaction: discord.Interaction, intent: ModalIntent) -> None:
        await acknowledge(interaction)
        payload: ScheduleGameDayPayload = intent.payload  # type: ignore[assignment]

        guild = interaction.guild
        host_id = str(interaction.user.id)
        if guild is None or str(guild.id) != payload.guild_id or host_id != payload.host_id:
            await reply(interaction, messages.FORM_EXPIRED)
            return

        values = submitted_values(interaction)
        title = values.get("title", "")
        if not title:
            await reply(interaction, "A game day needs a title.")
            return

        when = parse_date_time(values.get("date_time", ""), self.tz)
        if when is None:
            await reply(interaction, "Invalid date/time format. Please use YYYY-MM-DD HH:MM.")
            return
        if not is_future(when):
            await reply(interaction, "The game day must be scheduled for a future date and time.")
            return

        try:
            server = await self.repos.servers.get_by_discord_id(payload.guild_id)
            if server is not None:
                await self.repos.users.get_or_create(host_id, interaction.user.name, server.id)
            game = (
                await self.repos.games.get_by_role_id(payload.game_role_id)
                if payload.game_role_id
                else None
            )
        except PERSISTENCE_ERRORS as e:
            logger.error(f"Failed to prepare game day for guild {payload.guild_id}: {e}")
            await reply(interaction, messages.STORAGE_ERROR)
            return
        if server is None:
            await reply(interaction, messages.NOT_SET_UP)
            return

        try:
            role = await create_role(guild, game_day_role_name(title, when), "Game day event role")
        except discord.HTTPException as e:
            logger.warning(f"Could not create game day role: {e}")
            await reply(
                interaction,
                "Could not create the game day role. Please check the bot has Manage Roles.",
            )
            return

        description = values.get("description") or None
        location = values.get("location") or None
        try:
            game_day = await self.repos.game_days.create_draft(
                title=title,
                date_time=when,
                server_id=server.id,
                description=description,
                location=location,
                host_user_id=host_id,
                game_id=game.id if game else None,
                discord_role_id=str(role.id),
            )
        except PERSISTENCE_ERRORS as e:
            logger.error(f"Failed to create game day {title!r}: {e}")
            await best_effort(role.delete(reason="Game day creation failed"), "delete game day role")
            await reply(interaction, messages.STORAGE_ERROR)
            return

        caveats: list[str] = []
        changes: dict[str, Any] = {}

        category = await best_effort(
            create_private_category(guild, title, role, GAME_DAY_CHANNELS),
            "create game day channels",
        )
        if category is not None:
            changes["discord_category_id"] = str(category.id)
        else:
            caveats.append("The private channels could not be created.")

        event = None
        try:
            event = await create_game_day_event(
                guild, name=title, start=when, location=location, description=description
            )
            changes["discord_event_id"] = str(event.id)
        except EventError as e:
            logger.warning(f"Scheduled event for game day {game_day.id} failed: {e}")
            caveats.append(user_friendly_event_error(e))

        if changes:
            try:
                game_day = await self.repos.game_days.update(game_day.id, **changes) or game_day
            except PERSISTENCE_ERRORS as e:
                logger.error(f"Failed to link Discord resources to game day {game_day.id}: {e}")

        sync = game_day_synchronizer(self.repos.attendances, self.roles_for(guild))
        result = await sync.set_status(game_day, host_id, AttendanceStatus.AVAILABLE)
        if result.outcome is SyncOutcome.ROLE_FAILED:
            caveats.append(
                "You are marked available, but the game day role could not be given to you."
            )
        elif not result.saved:
            caveats.append("Your own RSVP could not be saved.")

        event_url = getattr(event, "url", None)
        channel = await best_effort(scheduling_channel(guild, self.repos), "find scheduling channel")
        if channel is None:
            caveats.append("No scheduling channel is set, so nothing was announced. Run `/setup`.")
        else:
            message = await best_effort(
                post_game_day(channel, game_day, self.repos, event_url), "post game day announcement"
            )
            if message is None:
                caveats.append("The announcement could not be posted.")
            elif event is not None:
                await best_effort(
                    link_announcement(guild, str(event.id), message.jump_url),
                    "link event to announcement",
                )

        attendances = [result.record] if result.saved else []
        logger.info(f"Game day {game_day.id} scheduled in guild {guild.id} by {host_id}")
        await reply(
            interaction,
            with_caveats(f"Game day **{title}** scheduled!", caveats),
            embed=game_day_embed(game_day, attendances, game, event_url),
        )
