"""Repository for the games table."""

from __future__ import annotations

import asyncpg

from shared.models.game import Game


class GameRepository:
    """Pure SQL operations for games."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(self, game_id: str) -> Game | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("SELECT * FROM games WHERE id = $1", game_id)
            return Game(**dict(row)) if row else None

    async def get_by_role_id(self, role_id: str) -> Game | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM games WHERE discord_role_id = $1 LIMIT 1",
                role_id,
            )
            return Game(**dict(row)) if row else None

    async def create(
        self,
        *,
        name: str,
        short_name: str,
        server_id: str,
        discord_role_id: str | None = None,
        description: str | None = None,
        min_players: int | None = None,
        max_players: int | None = None,
    ) -> Game:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO games
                    (name, short_name, description, discord_role_id,
                     min_players, max_players, server_id)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                RETURNING *
                """,
                name,
                short_name,
                description,
                discord_role_id,
                min_players,
                max_players,
                server_id,
            )
            return Game(**dict(row))

    async def list_for_server(self, server_id: str) -> list[Game]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM games WHERE server_id = $1 ORDER BY name",
                server_id,
            )
            return [Game(**dict(row)) for row in rows]
