"""Rental repository for database operations."""

import asyncpg
from datetime import date
from decimal import Decimal
from typing import List, Optional

from ..constants import CARS_TABLE, CUSTOMERS_TABLE, RENTALS_TABLE
from ..models import ActiveRental, Rental, RentalCreate, RentalHistoryEntry
from .base import affected_rows


class RentalRepository:
    """Repository for the rentals table and the reports joined on it."""

    def __init__(self, table_name: str = RENTALS_TABLE):
        self.table_name = table_name

    async def create(self, rental: RentalCreate, conn: asyncpg.Connection) -> Rental:
        """Insert an active rental (no return date, no total price).

        Args:
            rental: Rental request
            conn: Database connection (required)
        """
        rental_id = await conn.fetchval(
            f"""
            INSERT INTO {self.table_name} (customer_id, car_id, rental_date)
            VALUES ($1, $2, $3)
            RETURNING id
            """,
            rental.customer_id,
            rental.car_id,
            rental.rental_date,
        )
        return Rental(id=rental_id, **rental.model_dump())

    async def close(self, rental_id: int, return_date: date, total_price: Decimal,
                    conn: asyncpg.Connection) -> int:
        """Set return date and total price of a rental.

        Returns:
            Number of rows matched (0 if the rental does not exist)
        """
        status = await conn.execute(
            f"""
            UPDATE {self.table_name}
            SET return_date = $1, total_price = $2
            WHERE id = $3
            """,
            return_date,
            total_price,
            rental_id,
        )
        return affected_rows(status)

    async def get_car_id(self, rental_id: int, conn: asyncpg.Connection) -> Optional[int]:
        """Car id referenced by a rental, or None if the rental does not exist."""
        return await conn.fetchval(
            f"SELECT car_id FROM {self.table_name} WHERE id = $1",
            rental_id,
        )

    async def list_active(self, conn: asyncpg.Connection) -> List[ActiveRental]:
        rows = await conn.fetch(
            f"""
            SELECT car.brand, car.model, c.name, r.rental_date, r.id, car.price_per_day
            FROM {self.table_name} r
            JOIN {CUSTOMERS_TABLE} c ON r.customer_id = c.id
            JOIN {CARS_TABLE} car ON r.car_id = car.id
            WHERE r.return_date IS NULL
            ORDER BY r.id
            """
        )
        return [ActiveRental(**dict(row)) for row in rows]

    async def list_history(self, conn: asyncpg.Connection) -> List[RentalHistoryEntry]:
        rows = await conn.fetch(
            f"""
            SELECT r.id, r.rental_date, r.return_date, r.total_price, c.name, car.model, car.brand
            FROM {self.table_name} r
            JOIN {CUSTOMERS_TABLE} c ON r.customer_id = c.id
            JOIN {CARS_TABLE} car ON r.car_id = car.id
            ORDER BY r.id
            """
        )
        return [RentalHistoryEntry(**dict(row)) for row in rows]
