"""Custom IDs minted before the current codec."""

from __future__ import annotations

import logging
import re

import discord

from .. import messages

logger = logging.getLogger(__name__)

# Modal IDs from earlier releases that carry nothing the current forms can
# use. A user who submits one of these had the form open across a deploy.
EXPIRED_FORM_PATTERNS = (
    re.compile(r"schedule_modal_[0-9]+"),
    re.compile(r"game_setup_modal_[0-9]+"),
    re.compile(r"setup-modal"),
    re.compile(r"(?:gs|gds|cc):.*"),
)


class ExpiredFormHandler:
    def matches(self, custom_id: str) -> bool:
        return any(p.fullmatch(custom_id) for p in EXPIRED_FORM_PATTERNS)

    async def handle(self, interaction: discord.Interaction, custom_id: str) -> None:
        logger.info(f"Expired form {custom_id!r} submitted by {interaction.user.id}")
        await interaction.response.send_message(messages.FORM_EXPIRED, ephemeral=True)
