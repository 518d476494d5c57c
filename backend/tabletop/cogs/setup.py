"""Server onboarding: /setup and the guild join listener."""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from shared.database import PERSISTENCE_ERRORS

from .base import TabletopCog

logger = logging.getLogger(__name__)


class SetupCog(TabletopCog):
    @app_commands.command(name="setup", description="Set up the bot for this server")
    @app_commands.describe(scheduling_channel="Channel where game days and campaigns are announced")
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_guild=True)
    async def setup_server(
        self, interaction: discord.Interaction, scheduling_channel: discord.TextChannel
    ):
        await interaction.response.defer(ephemeral=True, thinking=True)

        server = await self.repos.servers.get_or_create(str(interaction.guild_id))
        await self.repos.servers.set_scheduling_channel(server.id, str(scheduling_channel.id))
        logger.info(
            f"Guild {interaction.guild_id} set scheduling channel {scheduling_channel.id}"
        )

        embed = discord.Embed(title="Setup complete", color=discord.Color.green())
        embed.add_field(name="Scheduling channel", value=scheduling_channel.mention)
        await interaction.followup.send(embed=embed, ephemeral=True)

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        try:
            await self.repos.servers.get_or_create(str(guild.id))
            logger.info(f"Joined guild {guild.name} ({guild.id})")
        except PERSISTENCE_ERRORS as e:
            logger.error(f"Could not record guild {guild.id}: {e}")


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(SetupCog(bot))
