"""Modal forms and helpers for reading their submitted values."""

from __future__ import annotations

from typing import Any

import discord

from .codec import encode
from .intents import ModalIntent, ModalKind

DEFAULT_MODAL_TIMEOUT = 300.0


def extract_values(data: dict[str, Any] | None) -> dict[str, str]:
    """Flatten a modal_submit payload into ``{custom_id: value}``.

    Handles both action-row wrapped inputs and label wrapped inputs.
    """
    values: dict[str, str] = {}
    if not data:
        return values

    def collect(component: dict[str, Any]) -> None:
        custom_id = component.get("custom_id")
        if isinstance(custom_id, str) and "value" in component:
            values[custom_id] = str(component.get("value") or "")

    for row in data.get("components") or []:
        if not isinstance(row, dict):
            continue
        for child in row.get("components") or []:
            if isinstance(child, dict):
                collect(child)
        child = row.get("component")
        if isinstance(child, dict):
            collect(child)
        collect(row)
    return values


def submitted_values(interaction: discord.Interaction) -> dict[str, str]:
    return {k: v.strip() for k, v in extract_values(interaction.data).items()}  # type: ignore[arg-type]


class _IntentModal(discord.ui.Modal):
    """Modal whose custom ID carries an encoded intent.

    Submissions are routed by the interaction dispatcher, so subclasses do
    not implement ``on_submit``.
    """

    expected_kind: ModalKind

    def __init__(self, intent: ModalIntent, *, timeout: float | None = DEFAULT_MODAL_TIMEOUT):
        if intent.modal is not self.expected_kind:
            raise ValueError(f"{type(self).__name__} cannot carry a {intent.modal.value} intent")
        super().__init__(custom_id=encode(intent), timeout=timeout)


class GameSetupModal(_IntentModal, title="Set up a game"):
    expected_kind = ModalKind.GAME_SETUP

    name: discord.ui.TextInput = discord.ui.TextInput(
        label="Game name", custom_id="name", max_length=100
    )
    short_name: discord.ui.TextInput = discord.ui.TextInput(
        label="Short name", custom_id="short_name", max_length=20
    )
    description: discord.ui.TextInput = discord.ui.TextInput(
        label="Description",
        custom_id="description",
        style=discord.TextStyle.paragraph,
        required=False,
        max_length=1000,
    )
    players: discord.ui.TextInput = discord.ui.TextInput(
        label="Players (min-max)",
        custom_id="players",
        placeholder="e.g. 2-5",
        required=False,
        max_length=9,
    )
    role_name: discord.ui.TextInput = discord.ui.TextInput(
        label="Role", custom_id="role_name", max_length=100
    )

    def __init__(
        self,
        intent: ModalIntent,
        *,
        role_name: str,
        timeout: float | None = DEFAULT_MODAL_TIMEOUT,
    ):
        super().__init__(intent, timeout=timeout)
        self.role_name.default = role_name


class ScheduleGameDayModal(_IntentModal, title="Schedule a game day"):
    expected_kind = ModalKind.SCHEDULE_GAME_DAY

    game_title: discord.ui.TextInput = discord.ui.TextInput(
        label="Title", custom_id="title", max_length=100
    )
    description: discord.ui.TextInput = discord.ui.TextInput(
        label="Description",
        custom_id="description",
        style=discord.TextStyle.paragraph,
        required=False,
        max_length=1000,
    )
    date_time: discord.ui.TextInput = discord.ui.TextInput(
        label="Date and time (YYYY-MM-DD HH:MM)",
        custom_id="date_time",
        placeholder="2025-06-14 18:30",
        min_length=16,
        max_length=16,
    )
    location: discord.ui.TextInput = discord.ui.TextInput(
        label="Location", custom_id="location", required=False, max_length=100
    )


class CreateCampaignModal(_IntentModal, title="Create a campaign"):
    expected_kind = ModalKind.CREATE_CAMPAIGN

    campaign_title: discord.ui.TextInput = discord.ui.TextInput(
        label="Campaign title", custom_id="title", max_length=100
    )
    description: discord.ui.TextInput = discord.ui.TextInput(
        label="Description",
        custom_id="description",
        style=discord.TextStyle.paragraph,
        required=False,
        max_length=1000,
    )
    regular_game_time: discord.ui.TextInput = discord.ui.TextInput(
        label="Regular game time",
        custom_id="regular_game_time",
        placeholder="Every other Friday, 7pm",
        max_length=100,
    )
    game_name: discord.ui.TextInput = discord.ui.TextInput(
        label="Game", custom_id="game_name", required=False, max_length=100
    )
    role_name: discord.ui.TextInput = discord.ui.TextInput(
        label="Campaign role name", custom_id="role_name", max_length=100
    )

    def __init__(
        self,
        intent: ModalIntent,
        *,
        game_name: str,
        role_name: str,
        timeout: float | None = DEFAULT_MODAL_TIMEOUT,
    ):
        super().__init__(intent, timeout=timeout)
        self.game_name.default = game_name
        self.role_name.default = role_name
