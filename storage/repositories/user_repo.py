"""User profile and platform repository."""

import asyncpg
import structlog
from typing import Any
from uuid import UUID
from config.constants import PROFILE_FIELDS
from storage.errors import UserNotFoundError

log = structlog.get_logger(__name__)


def _matched(status: str) -> bool:
    """True when an asyncpg command status (e.g. "UPDATE 1") touched a row."""
    return status.split()[-1] != "0"


class UserRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def get_profile(self, user_id: UUID) -> dict[str, Any]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT email, first_name, last_name, profile_picture
                FROM users WHERE id = $1
                """,
                user_id,
            )
        if row is None:
            raise UserNotFoundError(user_id)
        return {field: row[field] for field in PROFILE_FIELDS}

    async def update_profile(self, user_id: UUID, changes: dict[str, str]) -> None:
        """Write the given profile columns. Unknown keys are ignored."""
        columns = [field for field in PROFILE_FIELDS if field in changes]

        async with self._pool.acquire() as conn:
            if not columns:
                exists = await conn.fetchval("SELECT 1 FROM users WHERE id = $1", user_id)
                if exists is None:
                    raise UserNotFoundError(user_id)
                return

            # Column names come from PROFILE_FIELDS, never from the request
            assignments = ", ".join(
                f"{column} = ${position}" for position, column in enumerate(columns, start=2)
            )
            status = await conn.execute(
                f"UPDATE users SET {assignments}, updated_at = NOW() WHERE id = $1",
                user_id,
                *(changes[column] for column in columns),
            )
        if not _matched(status):
            raise UserNotFoundError(user_id)
        log.info("profile_updated", user_id=str(user_id), fields=columns)

    async def get_platforms(self, user_id: UUID) -> list[dict[str, str]]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow("SELECT platforms FROM users WHERE id = $1", user_id)
        if row is None:
            raise UserNotFoundError(user_id)
        return [
            {"name": entry["name"], "value": entry["value"]}
            for entry in (row["platforms"] or [])
        ]

    async def replace_platforms(self, user_id: UUID, platforms: list[dict[str, str]]) -> None:
        """Replace the stored platform list wholesale, keeping order."""
        async with self._pool.acquire() as conn:
            status = await conn.execute(
                """
                UPDATE users SET platforms = $2::jsonb, updated_at = NOW()
                WHERE id = $1
                """,
                user_id,
                platforms,
            )
        if not _matched(status):
            raise UserNotFoundError(user_id)
        log.info("platforms_replaced", user_id=str(user_id), count=len(platforms))

    async def get_profile_picture(self, user_id: UUID) -> str | None:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow("SELECT profile_picture FROM users WHERE id = $1", user_id)
        if row is None:
            raise UserNotFoundError(user_id)
        return row["profile_picture"]

    async def set_profile_picture(self, user_id: UUID, reference: str) -> str | None:
        """Point the user at a new picture. Returns the reference it replaced."""
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(
                    "SELECT profile_picture FROM users WHERE id = $1 FOR UPDATE", user_id
                )
                if row is None:
                    raise UserNotFoundError(user_id)
                await conn.execute(
                    "UPDATE users SET profile_picture = $2, updated_at = NOW() WHERE id = $1",
                    user_id,
                    reference,
                )
        return row["profile_picture"]
