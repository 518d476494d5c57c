"""Posting and refreshing announcement messages in the scheduling channel."""

from __future__ import annotations

import logging

import discord

from shared.models import Campaign, GameDay
from shared.repositories import Repositories

from ..embeds import campaign_embed, game_day_embed
from ..interactions.components import attendance_view, interest_view

logger = logging.getLogger(__name__)


async def scheduling_channel(
    guild: discord.Guild, repos: Repositories
) -> discord.TextChannel | None:
    server = await repos.servers.get_by_discord_id(str(guild.id))
    if server is None or not server.scheduling_channel_id:
        return None

    channel_id = int(server.scheduling_channel_id)
    channel = guild.get_channel(channel_id)
    if channel is None:
        try:
            channel = await guild.fetch_channel(channel_id)
        except discord.NotFound:
            logger.warning(f"Scheduling channel {channel_id} is gone in guild {guild.id}")
            return None
    return channel if isinstance(channel, discord.TextChannel) else None


async def post_game_day(
    channel: discord.abc.Messageable,
    game_day: GameDay,
    repos: Repositories,
    event_url: str | None = None,
) -> discord.Message:
    """Send the announcement with RSVP buttons and store its message id."""
    attendances = await repos.attendances.list_for_game_day(game_day.id)
    game = await repos.games.get(game_day.game_id) if game_day.game_id else None
    message = await channel.send(
        embed=game_day_embed(game_day, attendances, game, event_url),
        view=attendance_view(game_day.id),
    )
    await repos.game_days.update(game_day.id, announcement_message_id=str(message.id))
    return message


async def refresh_game_day(guild: discord.Guild, game_day: GameDay, repos: Repositories) -> bool:
    """Re-render the announcement tally. Raises on Discord or database errors."""
    if not game_day.announcement_message_id:
        return False
    channel = await scheduling_channel(guild, repos)
    if channel is None:
        return False

    current = await repos.game_days.get(game_day.id) or game_day
    message = await channel.fetch_message(int(game_day.announcement_message_id))
    attendances = await repos.attendances.list_for_game_day(game_day.id)
    game = await repos.games.get(current.game_id) if current.game_id else None

    view = attendance_view(current.id) if current.accepts_rsvps else None
    await message.edit(embed=game_day_embed(current, attendances, game), view=view)
    return True


async def post_campaign(
    channel: discord.abc.Messageable, campaign: Campaign, repos: Repositories
) -> discord.Message:
    players = await repos.players.list_for_campaign(campaign.id)
    message = await channel.send(
        embed=campaign_embed(campaign, players), view=interest_view(campaign.id)
    )
    await repos.campaigns.set_announcement(campaign.id, str(message.id))
    return message


async def refresh_campaign(guild: discord.Guild, campaign: Campaign, repos: Repositories) -> bool:
    if not campaign.announcement_message_id:
        return False
    channel = await scheduling_channel(guild, repos)
    if channel is None:
        return False
    message = await channel.fetch_message(int(campaign.announcement_message_id))
    players = await repos.players.list_for_campaign(campaign.id)
    await message.edit(embed=campaign_embed(campaign, players), view=interest_view(campaign.id))
    return True
