"""Interest button on campaign announcements."""

from __future__ import annotations

import logging
from collections.abc import Callable

import discord

from shared.database import PERSISTENCE_ERRORS
from shared.models.enums import PlayerStatus
from shared.repositories import Repositories

from .. import messages
from ..interactions.intents import Intent, InterestIntent
from ..services.announcements import refresh_campaign
from ..services.roles import DiscordRoleGateway, RoleGateway
from ..services.status_sync import SyncOutcome, campaign_synchronizer
from .common import acknowledge, reply

logger = logging.getLogger(__name__)


class CampaignInterestHandler:
    def __init__(
        self,
        repos: Repositories,
        roles_for: Callable[[discord.Guild], RoleGateway] = DiscordRoleGateway,
    ) -> None:
        self.repos = repos
        self.roles_for = roles_for

    def can_handle(self, intent: Intent) -> bool:
        return isinstance(intent, InterestIntent)

    async def handle(self, interaction: discord.Interaction, intent: InterestIntent) -> None:
        await acknowledge(interaction)

        guild = interaction.guild
        if guild is None:
            await reply(interaction, messages.GUILD_ONLY)
            return

        actor_id = str(interaction.user.id)
        try:
            campaign = await self.repos.campaigns.get(intent.subject_id)
            if campaign is not None:
                await self.repos.users.get_or_create(actor_id, interaction.user.name)
        except PERSISTENCE_ERRORS as e:
            logger.error(f"Failed to load campaign {intent.subject_id} for {actor_id}: {e}")
            await reply(interaction, messages.STORAGE_ERROR)
            return

        if campaign is None:
            await reply(interaction, messages.CAMPAIGN_NOT_FOUND)
            return

        sync = campaign_synchronizer(
            self.repos.players,
            self.roles_for(guild),
            on_change=lambda subject, _actor, _status: refresh_campaign(guild, subject, self.repos),
        )
        result = await sync.set_status(campaign, actor_id, PlayerStatus.INTERESTED)

        if not result.saved:
            await reply(interaction, messages.STORAGE_ERROR)
            return

        # An already confirmed player stays confirmed
        status = getattr(result.record, "status", PlayerStatus.INTERESTED)
        text = messages.campaign_interest_message(status, campaign.title)
        if result.outcome is SyncOutcome.ROLE_FAILED:
            text = f"{text}\n{messages.ROLE_SYNC_CAVEAT}"
        await reply(interaction, text)
