"""Button rows attached to announcements."""

from __future__ import annotations

import discord

from shared.models.enums import AttendanceStatus

from .codec import encode
from .intents import AttendanceIntent, InterestIntent

ATTENDANCE_BUTTONS: tuple[tuple[AttendanceStatus, str, discord.ButtonStyle], ...] = (
    (AttendanceStatus.AVAILABLE, "I'm in", discord.ButtonStyle.success),
    (AttendanceStatus.INTERESTED, "I'm interested", discord.ButtonStyle.primary),
    (AttendanceStatus.NOT_AVAILABLE, "Not available", discord.ButtonStyle.secondary),
)


def attendance_view(game_day_id: str) -> discord.ui.View:
    """RSVP buttons for a game day announcement.

    The buttons have no callbacks; presses are routed by custom ID.
    """
    view = discord.ui.View(timeout=None)
    for status, label, style in ATTENDANCE_BUTTONS:
        view.add_item(
            discord.ui.Button(
                label=label,
                style=style,
                custom_id=encode(AttendanceIntent(game_day_id, status)),
            )
        )
    return view


def interest_view(campaign_id: str) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(
        discord.ui.Button(
            label="I'm interested",
            style=discord.ButtonStyle.primary,
            custom_id=encode(InterestIntent(campaign_id)),
        )
    )
    return view
