"""asyncpg pool for the users table and the SQL migration runner."""

import json
import asyncpg
import structlog
from pathlib import Path
from typing import Any
from config.settings import settings

log = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

# platforms is JSONB; the codec hands repositories lists of dicts
_JSON_TYPES = ("jsonb", "json")

_pool: asyncpg.Pool | None = None


async def _register_json_codecs(conn: asyncpg.Connection) -> None:
    for type_name in _JSON_TYPES:
        await conn.set_type_codec(
            type_name, encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
        )


def pool_options() -> dict[str, Any]:
    """Keyword arguments for asyncpg.create_pool, taken from settings."""
    return {
        "dsn": settings.database_url,
        "min_size": settings.db_pool_min_size,
        "max_size": settings.db_pool_max_size,
        "init": _register_json_codecs,
    }


async def get_pool() -> asyncpg.Pool:
    """Return the shared pool, creating it on first use."""
    global _pool
    if _pool is None:
        options = pool_options()
        _pool = await asyncpg.create_pool(**options)
        log.info("database_pool_created", min_size=options["min_size"], max_size=options["max_size"])
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return
    pool, _pool = _pool, None
    await pool.close()
    log.info("database_pool_closed")


def pending_migrations(migrations_dir: Path, applied: set[str]) -> list[Path]:
    """SQL files not yet recorded as applied, in filename order."""
    return [path for path in sorted(migrations_dir.glob("*.sql")) if path.name not in applied]


async def run_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply each pending migration in its own transaction. Returns the applied filenames."""
    pool = await get_pool()
    applied_now: list[str] = []

    async with pool.acquire() as conn:
        await conn.execute(
            "CREATE TABLE IF NOT EXISTS _migrations ("
            "filename VARCHAR(255) PRIMARY KEY, applied_at TIMESTAMPTZ DEFAULT NOW())"
        )
        rows = await conn.fetch("SELECT filename FROM _migrations")

        for path in pending_migrations(migrations_dir, {row["filename"] for row in rows}):
            log.info("applying_migration", filename=path.name)
            async with conn.transaction():
                await conn.execute(path.read_text())
                await conn.execute("INSERT INTO _migrations (filename) VALUES ($1)", path.name)
            applied_now.append(path.name)

    log.info("migrations_complete", applied=applied_now)
    return applied_now
