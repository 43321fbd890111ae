"""Rental service: the operations behind each endpoint."""

import asyncpg
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from ..constants import API_NAME, RENTAL_NOT_FOUND, RENTAL_NOT_FOUND_AFTER_UPDATE
from ..exceptions import RentalNotFoundError
from ..models import (
    ActiveRental,
    Car,
    Customer,
    CustomerCreate,
    Rental,
    RentalCreate,
    RentalHistoryEntry,
)
from ..repository import CarRepository, CustomerRepository, RentalRepository

logger = logging.getLogger(__name__)


class RentalService:
    """Service for cars, customers and rentals.

    Every operation acquires its own connection from the pool and releases it
    when done. Operations touching both a rental and a car run inside a single
    transaction, so a failure at any step leaves no visible change.
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        car_repo: Optional[CarRepository] = None,
        customer_repo: Optional[CustomerRepository] = None,
        rental_repo: Optional[RentalRepository] = None,
        api_name: str = API_NAME,
    ):
        self.pool = pool
        self.car_repo = car_repo or CarRepository()
        self.customer_repo = customer_repo or CustomerRepository()
        self.rental_repo = rental_repo or RentalRepository()
        self.api_name = api_name

    async def ping(self) -> None:
        """Run a trivial query to check store connectivity."""
        async with self.pool.acquire() as conn:
            await conn.execute("SELECT 1")

    async def list_available_cars(self) -> List[Car]:
        async with self.pool.acquire() as conn:
            return await self.car_repo.list_available(conn)

    async def list_customers(self) -> List[Customer]:
        async with self.pool.acquire() as conn:
            return await self.customer_repo.list_all(conn)

    async def create_customer(self, customer: CustomerCreate) -> Customer:
        async with self.pool.acquire() as conn:
            created = await self.customer_repo.create(customer, conn=conn)
        logger.info(f"{self.api_name} Created customer {created.id}")
        return created

    async def create_rental(self, rental: RentalCreate) -> Rental:
        """Insert the rental and mark its car unavailable, atomically."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                created = await self.rental_repo.create(rental, conn=conn)
                await self.car_repo.set_availability(rental.car_id, False, conn=conn)
        logger.info(f"{self.api_name} Created rental {created.id} for car {rental.car_id}")
        return created

    async def list_active_rentals(self) -> List[ActiveRental]:
        async with self.pool.acquire() as conn:
            return await self.rental_repo.list_active(conn)

    async def rental_history(self) -> List[RentalHistoryEntry]:
        async with self.pool.acquire() as conn:
            return await self.rental_repo.list_history(conn)

    async def return_rental(
        self,
        rental_id: int,
        return_date: Optional[date] = None,
        total_price: Optional[Decimal] = None,
    ) -> int:
        """Return a rental and release its car.

        With ``return_date`` and ``total_price`` the rental is closed first;
        without them only the car is made available again. All steps share one
        transaction.

        Args:
            rental_id: Rental id
            return_date: Date the car came back
            total_price: Amount charged for the rental

        Returns:
            Id of the released car

        Raises:
            RentalNotFoundError: If no rental has this id (nothing is changed)
            ValueError: If only one of return_date/total_price is given
        """
        close_rental = return_date is not None or total_price is not None
        if close_rental and (return_date is None or total_price is None):
            raise ValueError("return_date and total_price must be given together")

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                if close_rental:
                    updated = await self.rental_repo.close(rental_id, return_date, total_price, conn=conn)
                    if updated == 0:
                        logger.warning(f"{self.api_name} Rental not found: {rental_id}")
                        raise RentalNotFoundError(rental_id, RENTAL_NOT_FOUND)

                car_id = await self.rental_repo.get_car_id(rental_id, conn=conn)
                if car_id is None:
                    logger.warning(f"{self.api_name} Rental not found: {rental_id}")
                    message = RENTAL_NOT_FOUND_AFTER_UPDATE if close_rental else RENTAL_NOT_FOUND
                    raise RentalNotFoundError(rental_id, message)

                await self.car_repo.set_availability(car_id, True, conn=conn)

        if close_rental:
            logger.info(f"{self.api_name} Rental {rental_id} completed, car {car_id} available")
        else:
            logger.info(f"{self.api_name} Car {car_id} returned for rental {rental_id}")
        return car_id
