"""Shared repository layer for the tabletop bot."""

from __future__ import annotations

from dataclasses import dataclass

import asyncpg

from .campaign import CampaignRepository, PlayerRepository
from .game import GameRepository
from .game_day import AttendanceRepository, GameDayRepository
from .server import ServerRepository, UserRepository


@dataclass
class Repositories:
    """Every repository bound to one pool."""

    servers: ServerRepository
    users: UserRepository
    games: GameRepository
    game_days: GameDayRepository
    attendances: AttendanceRepository
    campaigns: CampaignRepository
    players: PlayerRepository

    @classmethod
    def from_pool(cls, pool: asyncpg.Pool) -> Repositories:
        return cls(
            servers=ServerRepository(pool),
            users=UserRepository(pool),
            games=GameRepository(pool),
            game_days=GameDayRepository(pool),
            attendances=AttendanceRepository(pool),
            campaigns=CampaignRepository(pool),
            players=PlayerRepository(pool),
        )


__all__ = [
    "AttendanceRepository",
    "CampaignRepository",
    "GameDayRepository",
    "GameRepository",
    "PlayerRepository",
    "Repositories",
    "ServerRepository",
    "UserRepository",
]
