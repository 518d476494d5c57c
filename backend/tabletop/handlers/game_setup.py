"""Submission of the game setup modal."""

from __future__ import annotations

import logging
import re

import discord

from shared.database import PERSISTENCE_ERRORS
from shared.repositories import Repositories

from .. import messages
from ..embeds import game_embed
from ..interactions.intents import GameSetupPayload, Intent, ModalIntent, ModalKind
from ..interactions.modals import submitted_values
from ..services.roles import create_role, resolve_role
from ..services.side_effects import best_effort
from .common import acknowledge, reply

logger = logging.getLogger(__name__)

_PLAYERS_RE = re.compile(r"([0-9]{1,2})(?: *- *([0-9]{1,2}))?")


def parse_player_range(text: str) -> tuple[int | None, int | None] | None:
    """``"2-5"`` -> (2, 5), ``"4"`` -> (4, 4), ``""`` -> (None, None).

    None when the text is malformed or min exceeds max.
    """
    text = text.strip()
    if not text:
        return None, None
    match = _PLAYERS_RE.fullmatch(text)
    if not match:
        return None
    low = int(match.group(1))
    high = int(match.group(2)) if match.group(2) else low
    if low < 1 or low > high:
        return None
    return low, high


class GameSetupHandler:
    def __init__(self, repos: Repositories) -> None:
        self.repos = repos

    def can_handle(self, intent: Intent) -> bool:
        return isinstance(intent, ModalIntent) and intent.modal is ModalKind.GAME_SETUP

    async def handle(self, interaction: discord.Interaction, intent: ModalIntent) -> None:
        await acknowledge(interaction)
        payload: GameSetupPayload = intent.payload  # type: ignore[assignment]

        guild = interaction.guild
        if guild is None or str(guild.id) != payload.guild_id:
            await reply(interaction, messages.FORM_EXPIRED)
            return

        values = submitted_values(interaction)
        name = values.get("name", "")
        short_name = values.get("short_name", "")
        if not name or not short_name:
            await reply(interaction, "A game needs both a name and a short name.")
            return

        players = parse_player_range(values.get("players", ""))
        if players is None:
            await reply(interaction, "Players must look like `2-5` or `4`.")
            return

        try:
            server = await self.repos.servers.get_by_discord_id(payload.guild_id)
        except PERSISTENCE_ERRORS as e:
            logger.error(f"Failed to load server {payload.guild_id}: {e}")
            await reply(interaction, messages.STORAGE_ERROR)
            return
        if server is None:
            await reply(interaction, messages.NOT_SET_UP)
            return

        created_role = False
        if payload.role_id:
            role = guild.get_role(int(payload.role_id))
            if role is None:
                await reply(
                    interaction, "That role no longer exists. Please run `/game setup` again."
                )
                return
        else:
            role_name = values.get("role_name") or name
            role = resolve_role(guild, role_name)
            if role is None:
                try:
                    role = await create_role(guild, role_name, f"Game role for {name}")
                except discord.HTTPException as e:
                    logger.warning(f"Could not create role {role_name!r}: {e}")
                    await reply(
                        interaction,
                        "Could not create the role. Please check the bot has Manage Roles.",
                    )
                    return
                created_role = True

        min_players, max_players = players
        try:
            game = await self.repos.games.create(
                name=name,
                short_name=short_name,
                description=values.get("description") or None,
                discord_role_id=str(role.id),
                min_players=min_players,
                max_players=max_players,
                server_id=server.id,
            )
        except PERSISTENCE_ERRORS as e:
            logger.error(f"Failed to create game {name!r}: {e}")
            if created_role:
                await best_effort(role.delete(reason="Game creation failed"), "delete new game role")
            await reply(interaction, messages.STORAGE_ERROR)
            return

        logger.info(f"Game {game.id} ({game.name}) set up in guild {guild.id}")
        await reply(
            interaction,
            f"**{game.name}** is set up with the {role.mention} role.",
            embed=game_embed(game),
        )
