"""/game commands."""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from ..config import BotConfig
from ..embeds import game_list_embed
from ..interactions.intents import GameSetupPayload, ModalIntent, ModalKind
from ..interactions.modals import GameSetupModal
from ..services.roles import resolve_role
from .base import TabletopCog, requires_server

logger = logging.getLogger(__name__)


class GameCog(TabletopCog):
    game = app_commands.Group(name="game", description="Manage the games this server plays", guild_only=True)

    @game.command(name="setup", description="Register a game and its ping role")
    @app_commands.describe(role="Existing role (mention, id or name) or a name for a new role")
    @requires_server()
    async def setup_game(self, interaction: discord.Interaction, role: str):
        existing = resolve_role(interaction.guild, role)
        intent = ModalIntent(
            ModalKind.GAME_SETUP,
            GameSetupPayload(
                guild_id=str(interaction.guild_id),
                role_id=str(existing.id) if existing else None,
            ),
        )
        modal = GameSetupModal(
            intent,
            role_name=existing.name if existing else role.strip()[:100],
            timeout=BotConfig.MODAL_TIMEOUT_SECONDS,
        )
        await interaction.response.send_modal(modal)

    @game.command(name="list", description="List this server's games")
    @requires_server()
    async def list_games(self, interaction: discord.Interaction):
        server = await self.repos.servers.get_by_discord_id(str(interaction.guild_id))
        games = await self.repos.games.list_for_server(server.id)
        await interaction.response.send_message(embed=game_list_embed(games), ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(GameCog(bot))
