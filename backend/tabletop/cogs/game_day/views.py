"""Game day UI components."""

from typing import TYPE_CHECKING

import discord

from .constants import CANCEL_CONFIRM_TIMEOUT

if TYPE_CHECKING:
    from shared.models import GameDay

    from .cog import GameDayCog


class CancelConfirmView(discord.ui.View):
    """Confirm before cancelling a game day"""

    def __init__(self, cog: "GameDayCog", game_day: "GameDay", requester_id: int):
        super().__init__(timeout=CANCEL_CONFIRM_TIMEOUT)
        self.cog = cog
        self.game_day = game_day
        self.requester_id = requester_id

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.requester_id:
            await interaction.response.send_message(
                "Only the person who ran the command can confirm.", ephemeral=True
            )
            return False
        return True

    @discord.ui.button(label="Cancel game day", style=discord.ButtonStyle.danger)
    async def confirm(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        self.stop()
        await interaction.response.edit_message(content="Cancelling...", view=None)
        await self.cog.process_cancel(interaction, self.game_day)

    @discord.ui.button(label="Keep it", style=discord.ButtonStyle.secondary)
    async def keep(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        self.stop()
        await interaction.response.edit_message(
            content=f'"{self.game_day.title}" was not cancelled.', view=None
        )
