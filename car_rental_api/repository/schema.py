"""Schema bootstrap for the car rental tables."""

import asyncpg
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).parent / "schema.sql"


def load_schema_sql() -> str:
    return SCHEMA_FILE.read_text()


async def apply_schema(pool: asyncpg.Pool) -> None:
    """Create the cars, customers and rentals tables if they don't exist."""
    sql = load_schema_sql()
    async with pool.acquire() as conn:
        async with conn.transaction():
            await conn.execute(sql)
    logger.info(f"Schema applied from {SCHEMA_FILE.name}")
