"""/campaign commands."""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from ..config import BotConfig
from ..interactions.intents import CreateCampaignPayload, ModalIntent, ModalKind
from ..interactions.modals import CreateCampaignModal
from ..services.announcements import post_campaign, scheduling_channel
from ..services.roles import parse_role_reference
from .base import TabletopCog, requires_server

logger = logging.getLogger(__name__)


class CampaignCog(TabletopCog):
    campaign = app_commands.Group(
        name="campaign",
        description="Long-running campaigns",
        guild_only=True,
        default_permissions=discord.Permissions(administrator=True),
    )

    @campaign.command(name="create", description="Create a campaign with its own role and channels")
    @app_commands.describe(
        game="The game: an existing game role, or the name of a new game",
        role="Name for the campaign role",
    )
    @requires_server()
    async def create_campaign(self, interaction: discord.Interaction, game: str, role: str):
        game_role_id = parse_role_reference(game)
        intent = ModalIntent(
            ModalKind.CREATE_CAMPAIGN,
            CreateCampaignPayload(guild_id=str(interaction.guild_id), game_role_id=game_role_id),
        )
        modal = CreateCampaignModal(
            intent,
            game_name="" if game_role_id else game.strip()[:100],
            role_name=role.strip()[:100],
            timeout=BotConfig.MODAL_TIMEOUT_SECONDS,
        )
        await interaction.response.send_modal(modal)

    @campaign.command(name="announce", description="Post a campaign with an interest button")
    @app_commands.describe(role="The campaign's role")
    @requires_server()
    async def announce_campaign(self, interaction: discord.Interaction, role: discord.Role):
        await interaction.response.defer(ephemeral=True, thinking=True)

        campaign = await self.repos.campaigns.get_by_role_id(str(role.id))
        if campaign is None:
            await interaction.followup.send(f"No campaign uses {role.mention}.", ephemeral=True)
            return

        channel = await scheduling_channel(interaction.guild, self.repos) or interaction.channel
        message = await post_campaign(channel, campaign, self.repos)
        logger.info(f"Announced campaign {campaign.id} as message {message.id}")
        await interaction.followup.send(f"Campaign announced: {message.jump_url}", ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(CampaignCog(bot))
