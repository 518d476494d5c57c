"""Private categories visible only to one role."""

from __future__ import annotations

import logging

import discord

logger = logging.getLogger(__name__)

GAME_DAY_CHANNELS = ("general", "logistics", "food", "game")
CAMPAIGN_CHANNELS = ("general", "logistics", "game")


def private_overwrites(
    guild: discord.Guild, role: discord.Role
) -> dict[discord.Role | discord.Member, discord.PermissionOverwrite]:
    overwrites: dict[discord.Role | discord.Member, discord.PermissionOverwrite] = {
        guild.default_role: discord.PermissionOverwrite(view_channel=False),
        role: discord.PermissionOverwrite(view_channel=True),
    }
    if guild.me is not None:
        overwrites[guild.me] = discord.PermissionOverwrite(view_channel=True, manage_channels=True)
    return overwrites


async def create_private_category(
    guild: discord.Guild,
    name: str,
    role: discord.Role,
    channel_names: tuple[str, ...] = GAME_DAY_CHANNELS,
) -> discord.CategoryChannel:
    """Create a category plus text channels that inherit its overwrites.

    Raises discord.HTTPException. If a channel cannot be created, whatever
    was built so far is deleted before the error is re-raised.
    """
    category = await guild.create_category(
        name[:100], overwrites=private_overwrites(guild, role), reason=f"Private channels for {name}"
    )
    logger.info(f"Created category {category.name} ({category.id})")

    created: list[discord.abc.GuildChannel] = []
    try:
        for channel_name in channel_names:
            created.append(
                await category.create_text_channel(
                    channel_name, topic=f"{channel_name.capitalize()} for {name}"
                )
            )
    except discord.HTTPException as e:
        logger.warning(f"Channel setup failed in category {category.id}, removing it: {e}")
        await _remove_partial(category, created)
        raise
    logger.info(f"Created {len(channel_names)} channels in category {category.id}")
    return category


async def _remove_partial(
    category: discord.CategoryChannel, channels: list[discord.abc.GuildChannel]
) -> None:
    for channel in [*channels, category]:
        try:
            await channel.delete(reason="Private channel setup failed")
        except discord.HTTPException as e:
            logger.error(f"Could not remove {channel.id} after failed setup: {e}")


async def delete_private_category(guild: discord.Guild, category_id: str) -> bool:
    """Delete a category and its channels. False if it no longer exists."""
    category = guild.get_channel(int(category_id))
    if category is None:
        try:
            category = await guild.fetch_channel(int(category_id))
        except discord.NotFound:
            logger.warning(f"Category {category_id} not found")
            return False

    if not isinstance(category, discord.CategoryChannel):
        logger.warning(f"Channel {category_id} is not a category")
        return False

    for channel in list(category.channels):
        await channel.delete(reason="Game day cancelled")
    await category.delete(reason="Game day cancelled")
    logger.info(f"Deleted category {category_id} and its channels")
    return True
