"""Repository for discord_servers and users tables."""

from __future__ import annotations

import asyncpg

from shared.models.server import DiscordServer, User


class ServerRepository:
    """Guild install records and their settings."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get_by_discord_id(self, discord_id: str) -> DiscordServer | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM discord_servers WHERE discord_id = $1",
                discord_id,
            )
            return DiscordServer(**dict(row)) if row else None

    async def get_or_create(self, discord_id: str) -> DiscordServer:
        """Return the guild's record, inserting it on first sight."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO discord_servers (discord_id)
                VALUES ($1)
                ON CONFLICT (discord_id) DO UPDATE SET updated_at = NOW()
                RETURNING *
                """,
                discord_id,
            )
            return DiscordServer(**dict(row))

    async def set_scheduling_channel(self, server_id: str, channel_id: str) -> DiscordServer | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                UPDATE discord_servers
                SET scheduling_channel_id = $1, updated_at = NOW()
                WHERE id = $2
                RETURNING *
                """,
                channel_id,
                server_id,
            )
            return DiscordServer(**dict(row)) if row else None


class UserRepository:
    """Members who have interacted with the bot."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get_or_create(
        self, discord_id: str, username: str, server_id: str | None = None
    ) -> User:
        """Insert the member or refresh their username."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO users (discord_id, username, server_id)
                VALUES ($1, $2, $3)
                ON CONFLICT (discord_id) DO UPDATE SET
                    username  = EXCLUDED.username,
                    server_id = COALESCE(EXCLUDED.server_id, users.server_id)
                RETURNING *
                """,
                discord_id,
                username,
                server_id,
            )
            return User(**dict(row))
