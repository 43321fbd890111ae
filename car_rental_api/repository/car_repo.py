"""Car repository for database operations."""

import asyncpg
import logging
from typing import List

from ..constants import CARS_TABLE
from ..models import Car
from .base import affected_rows

logger = logging.getLogger(__name__)


class CarRepository:
    """Repository for the cars table."""

    def __init__(self, table_name: str = CARS_TABLE):
        self.table_name = table_name

    async def list_available(self, conn: asyncpg.Connection) -> List[Car]:
        """Return every car with ``available = true``."""
        rows = await conn.fetch(
            f"""
            SELECT id, brand, model, price_per_day, available
            FROM {self.table_name}
            WHERE available = true
            ORDER BY id
            """
        )
        return [Car(**dict(row)) for row in rows]

    async def set_availability(self, car_id: int, available: bool, conn: asyncpg.Connection) -> int:
        """Set the availability flag of a car.

        Returns:
            Number of rows updated (0 if the car does not exist)
        """
        status = await conn.execute(
            f"""
            UPDATE {self.table_name} SET available = $1 WHERE id = $2
            """,
            available,
            car_id,
        )
        updated = affected_rows(status)
        logger.debug(f"Car {car_id} availability set to {available} ({updated} row(s))")
        return updated
