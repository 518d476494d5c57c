"""Acknowledge-then-reply helpers shared by every handler."""

from __future__ import annotations

from typing import Any

import discord


async def acknowledge(interaction: discord.Interaction) -> None:
    """Defer ephemerally so the 3 second acknowledgement window is met."""
    if not interaction.response.is_done():
        await interaction.response.defer(ephemeral=True, thinking=True)


async def reply(
    interaction: discord.Interaction,
    content: str | None = None,
    *,
    embed: discord.Embed | None = None,
) -> None:
    """Replace the deferred "thinking" message."""
    kwargs: dict[str, Any] = {"content": content}
    if embed is not None:
        kwargs["embed"] = embed
    await interaction.edit_original_response(**kwargs)


def with_caveats(text: str, caveats: list[str]) -> str:
    if not caveats:
        return text
    return text + "\n" + "\n".join(f"⚠️ {c}" for c in caveats)
