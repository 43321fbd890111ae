"""Connection pool management (singleton per event loop)."""

import asyncpg
import asyncio
import logging
from typing import Optional

from ..config import AppConfig

logger = logging.getLogger(__name__)

# Global connection pool for the FastAPI app (single event loop)
_pool: Optional[asyncpg.Pool] = None
_pool_database_url: Optional[str] = None
_pool_loop_id: Optional[int] = None


async def get_connection_pool(config: AppConfig) -> asyncpg.Pool:
    """
    Get or create the connection pool.

    Invalidates and recreates the pool if:
    - The database URL changes
    - The current event loop differs from the loop that created the pool

    asyncpg pools must be used in the loop they were created in.
    """
    global _pool, _pool_database_url, _pool_loop_id

    current_loop_id = id(asyncio.get_running_loop())

    if _pool is not None:
        reason = None
        if _pool_database_url != config.database_url:
            reason = "Database URL changed"
        elif _pool_loop_id is not None and _pool_loop_id != current_loop_id:
            reason = f"Event loop changed (Pool loop: {_pool_loop_id}, Current loop: {current_loop_id})"

        if reason:
            logger.warning(f"Invalidating existing connection pool. Reason: {reason}")
            await close_connection_pool()

    if _pool is None:
        logger.info(
            f"Creating asyncpg pool for {config.database_endpoint}: "
            f"min_size={config.pool_min_size}, max_size={config.pool_max_size}, "
            f"timeout={config.command_timeout}s"
        )
        try:
            _pool = await asyncpg.create_pool(
                config.database_url,
                min_size=config.pool_min_size,
                max_size=config.pool_max_size,
                command_timeout=config.command_timeout,
            )
        except Exception as e:
            logger.error(f"Failed to create connection pool to {config.database_endpoint}: {e}", exc_info=True)
            raise
        _pool_database_url = config.database_url
        _pool_loop_id = current_loop_id
        logger.info(f"Connection pool created successfully: pool_id={id(_pool)}, loop_id={current_loop_id}")
    else:
        logger.debug(f"Returning existing connection pool: pool_id={id(_pool)}")

    return _pool


async def close_connection_pool() -> None:
    """Close the connection pool, forcing recreation on next use."""
    global _pool, _pool_database_url, _pool_loop_id

    if _pool is not None:
        logger.info("Closing connection pool")
        try:
            await _pool.close()
        except Exception as e:
            logger.warning(f"Error closing connection pool: {e}")
        _pool = None
        _pool_database_url = None
        _pool_loop_id = None
