import logging
from pathlib import Path
from typing import TypeAlias

import asqlite
from fastapi import Request
from fastapi.applications import FastAPI

from .config import Settings, settings

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "sql" / "schema.sql"

PRAGMAS = [
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA foreign_keys=ON;",
    "PRAGMA temp_store=MEMORY;",
    "PRAGMA cache_size=-2000;",  # ~2MB
]

DB: TypeAlias = asqlite.ProxiedConnection

logger = logging.getLogger(__name__)


async def init_schema(conn: DB, config: Settings = settings) -> None:
    # Imported here: database.game depends on this module for the DB alias.
    from ..database.game import ensure_game_state

    _ = await conn.executescript(SCHEMA_PATH.read_text())
    await ensure_game_state(conn, config)
    await conn.commit()


async def init_pool(app: FastAPI, size: int | None = None):
    size = size or settings.DB_POOL_SIZE
    db_path = settings.DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)
    async with asqlite.connect(db_path.absolute().as_posix()) as conn:
        await init_schema(conn)
    logger.info("Database ready at %s", db_path)
    app.state.db_pool = await asqlite.create_pool(
        db_path.absolute().as_posix(), size=size
    )
    # Pool lazily creates up to max_size; only those pre-created get PRAGMAs now.
    for _ in range(size):
        async with app.state.db_pool.acquire() as conn:
            for pragma in PRAGMAS:
                _ = await conn.execute(pragma)
            await conn.commit()


async def close_pool(app: FastAPI):
    pool: asqlite.Pool | None = getattr(app.state, "db_pool", None)
    if pool:
        await pool.close()


async def get_tx_conn(request: Request, immediate: bool = True):
    """One request, one transaction: everything the handler does commits or rolls back together."""
    pool: asqlite.Pool = request.state.parent.state.db_pool  # pyright: ignore[reportAny]
    async with pool.acquire() as conn:
        if immediate:
            _ = await conn.execute("BEGIN IMMEDIATE;")
        else:
            _ = await conn.execute("BEGIN;")
        try:
            yield conn
        except Exception:
            _ = await conn.execute("ROLLBACK;")
            raise
        else:
            _ = await conn.execute("COMMIT;")
