"""Tabletop bot configuration"""

import logging
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import discord

logger = logging.getLogger(__name__)

TABLETOP_DIR = Path(__file__).parent
BACKEND_DIR = TABLETOP_DIR.parent


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class BotConfig:
    TOKEN: str = os.getenv("DISCORD_BOT_TOKEN", "")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    GUILD_ID: str = os.getenv("DISCORD_GUILD_ID", "")

    STATUS: str = os.getenv("DISCORD_STATUS", "")
    ACTIVITY_TYPE: str = os.getenv("DISCORD_ACTIVITY_TYPE", "")
    ACTIVITY_NAME: str = os.getenv("DISCORD_ACTIVITY_NAME", "")

    PORT: int = int(os.getenv("PORT", "8080"))
    HEALTH_SERVER_ENABLED: bool = _flag("HEALTH_SERVER_ENABLED", "true")
    RUN_MIGRATIONS: bool = _flag("RUN_MIGRATIONS", "true")

    MODAL_TIMEOUT_SECONDS: float = float(os.getenv("MODAL_TIMEOUT_SECONDS", "300"))
    # Zone that typed game day times are interpreted in
    TIMEZONE: str = os.getenv("BOT_TIMEZONE", "UTC")

    @classmethod
    def missing(cls) -> list[str]:
        """Names of required settings that are empty."""
        required = {"DISCORD_BOT_TOKEN": cls.TOKEN, "DATABASE_URL": cls.DATABASE_URL}
        return [name for name, value in required.items() if not value]

    @classmethod
    def get_timezone(cls) -> ZoneInfo:
        try:
            return ZoneInfo(cls.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown BOT_TIMEZONE {cls.TIMEZONE!r}, falling back to UTC")
            return ZoneInfo("UTC")

    @classmethod
    def get_status(cls) -> discord.Status:
        status_map = {
            "online": discord.Status.online,
            "idle": discord.Status.idle,
            "dnd": discord.Status.dnd,
            "invisible": discord.Status.invisible,
        }
        return status_map.get(cls.STATUS.lower(), discord.Status.online)

    @classmethod
    def get_activity(cls) -> discord.Activity | None:
        """Presence activity from DISCORD_ACTIVITY_TYPE / DISCORD_ACTIVITY_NAME.

        Supports: playing, listening, watching, competing
        """
        if not cls.ACTIVITY_NAME:
            return None

        activity_map = {
            "playing": discord.ActivityType.playing,
            "listening": discord.ActivityType.listening,
            "watching": discord.ActivityType.watching,
            "competing": discord.ActivityType.competing,
        }
        activity_type = activity_map.get(cls.ACTIVITY_TYPE.lower(), discord.ActivityType.playing)
        return discord.Activity(type=activity_type, name=cls.ACTIVITY_NAME)
