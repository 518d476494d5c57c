"""Pieces shared by the tabletop cogs."""

from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from shared.repositories import Repositories

from .. import messages

logger = logging.getLogger(__name__)


class ServerNotSetUp(app_commands.CheckFailure):
    pass


def _repos(client: discord.Client) -> Repositories:
    repos = getattr(client, "repos", None)
    if repos is None:
        raise RuntimeError("Repositories not initialised on bot")
    return repos


def requires_server():
    """App command check: the guild must have run ``/setup``."""

    async def predicate(interaction: discord.Interaction) -> bool:
        if interaction.guild_id is None:
            raise app_commands.NoPrivateMessage()
        server = await _repos(interaction.client).servers.get_by_discord_id(str(interaction.guild_id))
        if server is None:
            raise ServerNotSetUp(messages.NOT_SET_UP)
        return True

    return app_commands.check(predicate)


async def send_ephemeral(interaction: discord.Interaction, content: str, **kwargs) -> None:
    if interaction.response.is_done():
        await interaction.followup.send(content, ephemeral=True, **kwargs)
    else:
        await interaction.response.send_message(content, ephemeral=True, **kwargs)


class TabletopCog(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @property
    def repos(self) -> Repositories:
        return _repos(self.bot)

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        if isinstance(error, ServerNotSetUp):
            message = messages.NOT_SET_UP
        elif isinstance(error, app_commands.NoPrivateMessage):
            message = messages.GUILD_ONLY
        elif isinstance(error, app_commands.MissingPermissions):
            message = "You don't have permission to use this command."
        elif isinstance(error, app_commands.BotMissingPermissions):
            missing = ", ".join(error.missing_permissions)
            message = f"I am missing permissions: {missing}"
        else:
            command = interaction.command.qualified_name if interaction.command else "?"
            logger.error(f"Command /{command} failed: {error}", exc_info=error)
            message = "Something went wrong while running that command."

        try:
            await send_ephemeral(interaction, message)
        except discord.HTTPException as e:
            logger.warning(f"Could not report command error: {e}")
