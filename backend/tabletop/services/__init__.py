"""Side-effecting operations the handlers and cogs build on."""

from .roles import DiscordRoleGateway, RoleGateway, RoleSyncError
from .side_effects import best_effort
from .status_sync import (
    StatusSynchronizer,
    SyncOutcome,
    SyncResult,
    campaign_synchronizer,
    game_day_synchronizer,
)

__all__ = [
    "DiscordRoleGateway",
    "RoleGateway",
    "RoleSyncError",
    "StatusSynchronizer",
    "SyncOutcome",
    "SyncResult",
    "best_effort",
    "campaign_synchronizer",
    "game_day_synchronizer",
]
