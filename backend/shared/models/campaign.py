"""Data models for campaigns and their players."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .enums import PlayerStatus


@dataclass
class Campaign:
    """A recurring game with its own role and private channels."""

    id: str
    title: str
    regular_game_time: str
    discord_role_id: str
    server_id: str
    description: str | None = None
    game_id: str | None = None
    game_name: str | None = None
    discord_category_id: str | None = None
    announcement_message_id: str | None = None
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        if self.game_name:
            return f"{self.title} ({self.game_name})"
        return self.title


@dataclass
class Player:
    """A member's interest in a campaign. Unique per (campaign_id, user_id)."""

    id: str
    campaign_id: str
    user_id: str
    status: PlayerStatus = PlayerStatus.INTERESTED
    character_name: str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        self.status = PlayerStatus(self.status)
