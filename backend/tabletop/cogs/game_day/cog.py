"""/game_day and /attend commands."""

import logging

import discord
from discord import app_commands

from shared.models import AttendanceStatus, GameDayStatus

from ...config import BotConfig
from ...embeds import game_day_list_embed
from ...handlers.attendance import record_attendance
from ...handlers.common import with_caveats
from ...interactions.intents import ModalIntent, ModalKind, ScheduleGameDayPayload
from ...interactions.modals import ScheduleGameDayModal
from ...interactions.validation import is_uuid
from ...services.announcements import post_game_day, scheduling_channel
from ...services.events import fetch_event, link_announcement
from ...services.lifecycle import cancel_game_day
from ...services.roles import DiscordRoleGateway, resolve_role
from ...services.side_effects import best_effort
from ..base import TabletopCog, requires_server
from .constants import UPCOMING_LIST_LIMIT
from .views import CancelConfirmView

logger = logging.getLogger(__name__)


class GameDayCog(TabletopCog):
    game_day = app_commands.Group(name="game_day", description="Plan game days", guild_only=True)
    roles_for = DiscordRoleGateway

    @game_day.command(name="schedule", description="Schedule a new game day")
    @app_commands.describe(role="Optional game role (mention, id or name) this game day is for")
    @requires_server()
    async def schedule(self, interaction: discord.Interaction, role: str | None = None):
        game_role_id = None
        if role:
            game_role = resolve_role(interaction.guild, role)
            if game_role is None:
                await interaction.response.send_message(
                    f"Could not find a role matching `{role}`.", ephemeral=True
                )
                return
            game_role_id = str(game_role.id)

        intent = ModalIntent(
            ModalKind.SCHEDULE_GAME_DAY,
            ScheduleGameDayPayload(
                guild_id=str(interaction.guild_id),
                host_id=str(interaction.user.id),
                game_role_id=game_role_id,
            ),
        )
        await interaction.response.send_modal(
            ScheduleGameDayModal(intent, timeout=BotConfig.MODAL_TIMEOUT_SECONDS)
        )

    @game_day.command(name="announce", description="Post the announcement for a game day")
    @app_commands.describe(role="The game day's role")
    @requires_server()
    async def announce(self, interaction: discord.Interaction, role: discord.Role):
        await interaction.response.defer(ephemeral=True, thinking=True)

        game_day = await self.repos.game_days.get_by_role_id(str(role.id))
        if game_day is None:
            await interaction.followup.send(
                f"{role.mention} is not associated with any game day.", ephemeral=True
            )
            return
        if game_day.announcement_message_id:
            await interaction.followup.send(
                f'"{game_day.title}" has already been announced.', ephemeral=True
            )
            return

        channel = await scheduling_channel(interaction.guild, self.repos)
        if channel is None:
            await interaction.followup.send(
                "No scheduling channel is set. Run `/setup` first.", ephemeral=True
            )
            return

        event = None
        if game_day.discord_event_id:
            event = await best_effort(
                fetch_event(interaction.guild, game_day.discord_event_id), "fetch game day event"
            )
        message = await post_game_day(
            channel, game_day, self.repos, event.url if event else None
        )
        if event is not None:
            await best_effort(
                link_announcement(interaction.guild, str(event.id), message.jump_url),
                "link event to announcement",
            )

        logger.info(f"Announced game day {game_day.id} as message {message.id}")
        await interaction.followup.send(f"Announced: {message.jump_url}", ephemeral=True)

    @game_day.command(name="cancel", description="Cancel a game day")
    @app_commands.describe(role="The game day's role")
    @app_commands.checks.has_permissions(administrator=True)
    @requires_server()
    async def cancel(self, interaction: discord.Interaction, role: discord.Role):
        game_day = await self.repos.game_days.get_by_role_id(str(role.id))
        if game_day is None:
            await interaction.response.send_message(
                f"{role.mention} is not associated with any game day.", ephemeral=True
            )
            return
        if game_day.status is GameDayStatus.CANCELLED:
            await interaction.response.send_message(
                f'"{game_day.title}" is already cancelled.', ephemeral=True
            )
            return

        await interaction.response.send_message(
            f'Cancel "{game_day.title}"? Its event and private channels will be deleted.',
            view=CancelConfirmView(self, game_day, interaction.user.id),
            ephemeral=True,
        )

    async def process_cancel(self, interaction: discord.Interaction, game_day) -> None:
        report = await cancel_game_day(interaction.guild, game_day, self.repos)
        if report is None:
            await interaction.edit_original_response(
                content="Failed to cancel the game day. Please try again later."
            )
            return

        text = f'Game day "{game_day.title}" has been cancelled.'
        await interaction.edit_original_response(content=with_caveats(text, report.caveats))

    @app_commands.command(name="attend", description="Set your attendance status for a game day")
    @app_commands.describe(
        game_day_id="The game day ID shown in the announcement footer",
        status="Your attendance status",
    )
    @app_commands.choices(
        status=[
            app_commands.Choice(name="Available", value=AttendanceStatus.AVAILABLE.value),
            app_commands.Choice(name="Interested", value=AttendanceStatus.INTERESTED.value),
            app_commands.Choice(name="Not Available", value=AttendanceStatus.NOT_AVAILABLE.value),
        ]
    )
    @app_commands.guild_only()
    @requires_server()
    async def attend(
        self,
        interaction: discord.Interaction,
        game_day_id: str,
        status: app_commands.Choice[str],
    ):
        game_day_id = game_day_id.strip()
        if not is_uuid(game_day_id):
            await interaction.response.send_message(
                "That is not a valid game day ID. Copy it from the announcement footer.",
                ephemeral=True,
            )
            return
        await record_attendance(
            interaction,
            self.repos,
            game_day_id.lower(),
            AttendanceStatus(status.value),
            self.roles_for,
        )

    @game_day.command(name="list", description="List upcoming game days")
    @requires_server()
    async def list_game_days(self, interaction: discord.Interaction):
        server = await self.repos.servers.get_by_discord_id(str(interaction.guild_id))
        game_days = await self.repos.game_days.list_upcoming(server.id, limit=UPCOMING_LIST_LIMIT)
        await interaction.response.send_message(
            embed=game_day_list_embed(game_days), ephemeral=True
        )
