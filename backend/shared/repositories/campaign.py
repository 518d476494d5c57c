"""Repository for campaigns and players tables."""

from __future__ import annotations

import asyncpg

from shared.models.campaign import Campaign, Player
from shared.models.enums import PlayerStatus


class CampaignRepository:
    """Pure SQL operations for campaigns."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(self, campaign_id: str) -> Campaign | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("SELECT * FROM campaigns WHERE id = $1", campaign_id)
            return Campaign(**dict(row)) if row else None

    async def get_by_role_id(self, role_id: str) -> Campaign | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM campaigns WHERE discord_role_id = $1 LIMIT 1",
                role_id,
            )
            return Campaign(**dict(row)) if row else None

    async def create(
        self,
        *,
        title: str,
        regular_game_time: str,
        discord_role_id: str,
        server_id: str,
        description: str | None = None,
        game_id: str | None = None,
        game_name: str | None = None,
    ) -> Campaign:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO campaigns
                    (title, description, game_id, game_name, regular_game_time,
                     discord_role_id, server_id)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                RETURNING *
                """,
                title,
                description,
                game_id,
                game_name,
                regular_game_time,
                discord_role_id,
                server_id,
            )
            return Campaign(**dict(row))

    async def set_announcement(self, campaign_id: str, message_id: str) -> None:
        async with self.pool.acquire() as conn:
            await conn.execute(
                "UPDATE campaigns SET announcement_message_id = $1 WHERE id = $2",
                message_id,
                campaign_id,
            )

    async def set_category(self, campaign_id: str, category_id: str) -> None:
        async with self.pool.acquire() as conn:
            await conn.execute(
                "UPDATE campaigns SET discord_category_id = $1 WHERE id = $2",
                category_id,
                campaign_id,
            )


class PlayerRepository:
    """Campaign membership, at most one row per (campaign, member)."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def list_for_campaign(self, campaign_id: str) -> list[Player]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM players WHERE campaign_id = $1 ORDER BY created_at",
                campaign_id,
            )
            return [Player(**dict(row)) for row in rows]

    async def upsert_status(
        self, campaign_id: str, user_id: str, status: PlayerStatus
    ) -> Player | None:
        """Insert or update the member's standing.

        A CONFIRMED player is never demoted back to INTERESTED.
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO players (campaign_id, user_id, status)
                VALUES ($1, $2, $3)
                ON CONFLICT (campaign_id, user_id) DO UPDATE SET
                    status = CASE
                        WHEN players.status = 'CONFIRMED' THEN players.status
                        ELSE EXCLUDED.status
                    END
                RETURNING *
                """,
                campaign_id,
                user_id,
                PlayerStatus(status).value,
            )
            return Player(**dict(row)) if row else None
