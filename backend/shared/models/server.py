"""Data models for guild-level records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DiscordServer:
    """A guild the bot has been installed in."""

    id: str
    discord_id: str
    scheduling_channel_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class User:
    """A Discord member known to the bot."""

    discord_id: str
    username: str
    server_id: str | None = None
