"""Game day feature module."""

from discord.ext import commands

from .cog import GameDayCog

__all__ = ["GameDayCog", "setup"]


async def setup(bot: commands.Bot) -> None:
    """Extension entry point."""
    await bot.add_cog(GameDayCog(bot))
