"""Shared data models for the tabletop bot."""

from .campaign import Campaign, Player
from .enums import AttendanceStatus, GameDayStatus, PlayerStatus
from .game import Game
from .game_day import Attendance, GameDay
from .server import DiscordServer, User

__all__ = [
    "Attendance",
    "AttendanceStatus",
    "Campaign",
    "DiscordServer",
    "Game",
    "GameDay",
    "GameDayStatus",
    "Player",
    "PlayerStatus",
    "User",
]
