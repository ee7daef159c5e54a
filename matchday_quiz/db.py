# matchday_quiz/db.py
import asyncio
import logging

import asyncpg
from typing import Optional
from .config import DB_USER, DB_PASS, DB_NAME, DB_HOST, DB_PORT, DB_ENABLE_SSL

logger = logging.getLogger(__name__)

_pool: Optional[asyncpg.Pool] = None


async def get_pool() -> asyncpg.Pool:
    global _pool
    if _pool is not None:
        return _pool

    if not DB_PASS or not DB_NAME:
        raise ValueError("DB_PASS or DB_NAME missing in environment")

    _pool = await asyncpg.create_pool(
        user=DB_USER,
        password=DB_PASS,
        database=DB_NAME,
        host=DB_HOST,
        port=DB_PORT,
        ssl=DB_ENABLE_SSL,
    )
    logger.info("✅ Database pool created")
    return _pool


async def init_schema() -> None:
    pool = await get_pool()
    async with pool.acquire() as conn:
        # One row per saved slice of a player's game ("<prefix>:<slice>")
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS game_state
            (
                key        TEXT PRIMARY KEY,
                value      TEXT        NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
            """
        )

    logger.info("✅ Schema created / already existed")


# run init_schema only
if __name__ == "__main__":
    asyncio.run(init_schema())
