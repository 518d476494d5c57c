"""Submission of the create campaign modal."""

from __future__ import annotations

import logging

import discord

from shared.database import PERSISTENCE_ERRORS
from shared.repositories import Repositories

from .. import messages
from ..embeds import campaign_embed
from ..interactions.intents import CreateCampaignPayload, Intent, ModalIntent, ModalKind
from ..interactions.modals import submitted_values
from ..services.channels import CAMPAIGN_CHANNELS, create_private_category
from ..services.roles import campaign_role_name, create_role
from ..services.side_effects import best_effort
from .common import acknowledge, reply, with_caveats

logger = logging.getLogger(__name__)


class CreateCampaignHandler:
    def __init__(self, repos: Repositories) -> None:
        self.repos = repos

    def can_handle(self, intent: Intent) -> bool:
        return isinstance(intent, ModalIntent) and intent.modal is ModalKind.CREATE_CAMPAIGN

    async def handle(self, interaction: discord.Interaction, intent: ModalIntent) -> None:
        await acknowledge(interaction)
        payload: CreateCampaignPayload = intent.payload  # type: ignore[assignment]

        guild = interaction.guild
        if guild is None or str(guild.id) != payload.guild_id:
            await reply(interaction, messages.FORM_EXPIRED)
            return

        values = submitted_values(interaction)
        title = values.get("title", "")
        regular_game_time = values.get("regular_game_time", "")
        if not title or not regular_game_time:
            await reply(interaction, "A campaign needs a title and a regular game time.")
            return

        try:
            server = await self.repos.servers.get_by_discord_id(payload.guild_id)
            game = (
                await self.repos.games.get_by_role_id(payload.game_role_id)
                if payload.game_role_id
                else None
            )
        except PERSISTENCE_ERRORS as e:
            logger.error(f"Failed to prepare campaign for guild {payload.guild_id}: {e}")
            await reply(interaction, messages.STORAGE_ERROR)
            return
        if server is None:
            await reply(interaction, messages.NOT_SET_UP)
            return

        # Without a known game the typed name is kept as free text
        game_name = None if game else (values.get("game_name") or None)

        try:
            role = await create_role(
                guild,
                campaign_role_name(values.get("role_name") or title),
                f"Campaign role for {title}",
            )
        except discord.HTTPException as e:
            logger.warning(f"Could not create campaign role: {e}")
            await reply(interaction, "Could not create the campaign role. Please check the bot has Manage Roles.")
            return

        try:
            campaign = await self.repos.campaigns.create(
                title=title,
                regular_game_time=regular_game_time,
                discord_role_id=str(role.id),
                server_id=server.id,
                description=values.get("description") or None,
                game_id=game.id if game else None,
                game_name=game.name if game else game_name,
            )
        except PERSISTENCE_ERRORS as e:
            logger.error(f"Failed to create campaign {title!r}: {e}")
            await best_effort(role.delete(reason="Campaign creation failed"), "delete campaign role")
            await reply(interaction, messages.STORAGE_ERROR)
            return

        caveats: list[str] = []
        category = await best_effort(
            create_private_category(guild, f"Campaign: {title}", role, CAMPAIGN_CHANNELS),
            "create campaign channels",
        )
        if category is None:
            caveats.append("Campaign created, but the channels could not be created. Please check bot permissions.")
        else:
            await best_effort(
                self.repos.campaigns.set_category(campaign.id, str(category.id)),
                "store campaign category",
            )

        logger.info(f"Campaign {campaign.id} ({title}) created in guild {guild.id}")
        await reply(
            interaction,
            with_caveats(
                f'Campaign "{title}" has been created. Members with {role.mention} can see its channels.',
                caveats,
            ),
            embed=campaign_embed(campaign),
        )
