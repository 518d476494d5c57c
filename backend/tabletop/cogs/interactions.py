"""Feeds button presses and modal submissions to the dispatcher."""

import logging

import discord
from discord.ext import commands

logger = logging.getLogger(__name__)


def should_dispatch(interaction: discord.Interaction) -> bool:
    if interaction.type is discord.InteractionType.modal_submit:
        return True
    if interaction.type is discord.InteractionType.component:
        data = interaction.data or {}
        return data.get("component_type") == discord.ComponentType.button.value
    return False


class InteractionsCog(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if not should_dispatch(interaction):
            return
        dispatcher = getattr(self.bot, "dispatcher", None)
        if dispatcher is None:
            logger.warning("Interaction received before the dispatcher was ready")
            return
        await dispatcher.dispatch(interaction)


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(InteractionsCog(bot))
