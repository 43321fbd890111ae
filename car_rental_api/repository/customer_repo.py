"""Customer repository for database operations."""

import asyncpg
from typing import List

from ..constants import CUSTOMERS_TABLE
from ..models import Customer, CustomerCreate


class CustomerRepository:
    """Repository for the customers table."""

    def __init__(self, table_name: str = CUSTOMERS_TABLE):
        self.table_name = table_name

    async def list_all(self, conn: asyncpg.Connection) -> List[Customer]:
        rows = await conn.fetch(
            f"SELECT id, name, email, phone FROM {self.table_name} ORDER BY id"
        )
        return [Customer(**dict(row)) for row in rows]

    async def create(self, customer: CustomerCreate, conn: asyncpg.Connection) -> Customer:
        """Insert a customer and return it with the generated id."""
        customer_id = await conn.fetchval(
            f"""
            INSERT INTO {self.table_name} (name, email, phone)
            VALUES ($1, $2, $3)
            RETURNING id
            """,
            customer.name,
            customer.email,
            customer.phone,
        )
        return Customer(id=customer_id, **customer.model_dump())
