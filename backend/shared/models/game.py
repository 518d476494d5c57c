"""Data model for the games table."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Game:
    """A tabletop game a guild plays, tied to a ping role."""

    id: str
    name: str
    short_name: str
    description: str | None = None
    discord_role_id: str | None = None
    min_players: int | None = None
    max_players: int | None = None
    server_id: str | None = None
