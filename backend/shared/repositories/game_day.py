"""Repository for game_days and attendances tables."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import asyncpg

from shared.models.enums import AttendanceStatus, GameDayStatus
from shared.models.game_day import Attendance, GameDay

# Columns callers may change through GameDayRepository.update()
_UPDATABLE_COLUMNS = frozenset(
    {
        "title",
        "description",
        "date_time",
        "location",
        "status",
        "discord_role_id",
        "discord_category_id",
        "discord_event_id",
        "announcement_message_id",
    }
)


class GameDayRepository:
    """Pure SQL operations for game days."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(self, game_day_id: str) -> GameDay | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("SELECT * FROM game_days WHERE id = $1", game_day_id)
            return GameDay(**dict(row)) if row else None

    async def get_by_role_id(self, role_id: str) -> GameDay | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT * FROM game_days
                WHERE discord_role_id = $1
                ORDER BY created_at DESC
                LIMIT 1
                """,
                role_id,
            )
            return GameDay(**dict(row)) if row else None

    async def create_draft(
        self,
        *,
        title: str,
        date_time: datetime,
        server_id: str,
        description: str | None = None,
        location: str | None = None,
        host_user_id: str | None = None,
        game_id: str | None = None,
        discord_role_id: str | None = None,
    ) -> GameDay:
        """Insert a game day open for RSVPs."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO game_days
                    (title, description, date_time, location, host_user_id,
                     game_id, server_id, discord_role_id, status)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                RETURNING *
                """,
                title,
                description,
                date_time,
                location,
                host_user_id,
                game_id,
                server_id,
                discord_role_id,
                GameDayStatus.SCHEDULING.value,
            )
            return GameDay(**dict(row))

    async def update(self, game_day_id: str, **changes: Any) -> GameDay | None:
        """Partial update. Returns the updated row, or None if it no longer exists."""
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update game_days columns: {sorted(unknown)}")
        if not changes:
            return await self.get(game_day_id)

        updates: list[str] = []
        values: list[Any] = []
        for idx, (column, value) in enumerate(changes.items(), start=1):
            updates.append(f"{column} = ${idx}")
            values.append(value.value if isinstance(value, GameDayStatus) else value)

        values.append(game_day_id)
        query = (
            f"UPDATE game_days "
            f"SET {', '.join(updates)}, updated_at = NOW() "
            f"WHERE id = ${len(values)} "
            f"RETURNING *"
        )
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(query, *values)
            return GameDay(**dict(row)) if row else None

    async def list_upcoming(self, server_id: str, limit: int = 25) -> list[GameDay]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT * FROM game_days
                WHERE server_id = $1
                  AND date_time >= NOW()
                  AND status <> 'CANCELLED'
                ORDER BY date_time
                LIMIT $2
                """,
                server_id,
                limit,
            )
            return [GameDay(**dict(row)) for row in rows]


class AttendanceRepository:
    """RSVP records, at most one per (game day, member)."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(self, game_day_id: str, user_id: str) -> Attendance | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM attendances WHERE game_day_id = $1 AND user_id = $2",
                game_day_id,
                user_id,
            )
            return Attendance(**dict(row)) if row else None

    async def list_for_game_day(self, game_day_id: str) -> list[Attendance]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT * FROM attendances WHERE game_day_id = $1 ORDER BY created_at",
                game_day_id,
            )
            return [Attendance(**dict(row)) for row in rows]

    async def upsert_status(
        self, game_day_id: str, user_id: str, status: AttendanceStatus
    ) -> Attendance | None:
        """Insert or overwrite the member's RSVP. Last write wins."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO attendances (game_day_id, user_id, status)
                VALUES ($1, $2, $3)
                ON CONFLICT (game_day_id, user_id) DO UPDATE SET
                    status     = EXCLUDED.status,
                    updated_at = NOW()
                RETURNING *
                """,
                game_day_id,
                user_id,
                AttendanceStatus(status).value,
            )
            return Attendance(**dict(row)) if row else None
