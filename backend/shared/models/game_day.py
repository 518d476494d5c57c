"""Data models for game days and their attendance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .enums import AttendanceStatus, GameDayStatus


@dataclass
class GameDay:
    """A scheduled session members RSVP to."""

    id: str
    title: str
    date_time: datetime
    status: GameDayStatus = GameDayStatus.SCHEDULING
    description: str | None = None
    location: str | None = None
    host_user_id: str | None = None
    game_id: str | None = None
    server_id: str | None = None
    discord_role_id: str | None = None
    discord_category_id: str | None = None
    discord_event_id: str | None = None
    announcement_message_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.status = GameDayStatus(self.status)

    @property
    def accepts_rsvps(self) -> bool:
        return self.status is GameDayStatus.SCHEDULING


@dataclass
class Attendance:
    """One member's RSVP for one game day. Unique per (game_day_id, user_id)."""

    id: str
    game_day_id: str
    user_id: str
    status: AttendanceStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.status = AttendanceStatus(self.status)
