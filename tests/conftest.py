"""Pytest configuration and shared fixtures."""

import copy
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from car_rental_api.models import (
    ActiveRental,
    Car,
    Customer,
    CustomerCreate,
    Rental,
    RentalCreate,
    RentalHistoryEntry,
)
from car_rental_api.service import RentalService


@pytest.fixture
def sample_car_row() -> Dict[str, Any]:
    """Car row as asyncpg would return it."""
    return {
        "id": 1,
        "brand": "Toyota",
        "model": "Corolla",
        "price_per_day": Decimal("45.00"),
        "available": True,
    }


@pytest.fixture
def sample_customer() -> Dict[str, Any]:
    return {"name": "A", "email": "a@x.com", "phone": "555"}


@pytest.fixture
def sample_rental_request() -> Dict[str, Any]:
    return {"customer_id": 1, "car_id": 1, "rental_date": "2024-01-15"}


@pytest.fixture
def sample_return_request() -> Dict[str, Any]:
    return {"rentalId": 7, "returnDate": "2024-01-20", "totalPrice": 225.5}


@pytest.fixture
def mock_connection():
    """Mock asyncpg connection."""
    conn = AsyncMock()
    conn.transaction = MagicMock()
    conn.transaction.return_value.__aenter__ = AsyncMock()
    conn.transaction.return_value.__aexit__ = AsyncMock(return_value=None)
    return conn


@pytest.fixture
def mock_pool(mock_connection):
    """Mock asyncpg pool whose acquire() yields mock_connection."""
    pool = MagicMock()
    pool.acquire.return_value.__aenter__ = AsyncMock(return_value=mock_connection)
    pool.acquire.return_value.__aexit__ = AsyncMock(return_value=None)
    return pool


class InMemoryStore:
    """Tables kept in dicts; snapshot/restore stands in for rollback."""

    def __init__(self):
        self.cars: Dict[int, Dict[str, Any]] = {}
        self.customers: Dict[int, Dict[str, Any]] = {}
        self.rentals: Dict[int, Dict[str, Any]] = {}
        self.next_ids = {"cars": 1, "customers": 1, "rentals": 1}

    def _next_id(self, table: str) -> int:
        value = self.next_ids[table]
        self.next_ids[table] += 1
        return value

    def add_car(self, brand: str, model: str, price_per_day: float, available: bool = True) -> int:
        car_id = self._next_id("cars")
        self.cars[car_id] = {
            "id": car_id,
            "brand": brand,
            "model": model,
            "price_per_day": Decimal(str(price_per_day)),
            "available": available,
        }
        return car_id

    def snapshot(self):
        return copy.deepcopy((self.cars, self.customers, self.rentals, self.next_ids))

    def restore(self, state) -> None:
        self.cars, self.customers, self.rentals, self.next_ids = state


class InMemoryConnection:
    def __init__(self, store: InMemoryStore):
        self.store = store

    @asynccontextmanager
    async def transaction(self):
        state = self.store.snapshot()
        try:
            yield
        except BaseException:
            self.store.restore(state)
            raise

    async def execute(self, query: str, *args):
        return "SELECT 1"


class InMemoryPool:
    def __init__(self, store: InMemoryStore):
        self.store = store
        self.acquired = 0
        self.released = 0

    @asynccontextmanager
    async def acquire(self):
        self.acquired += 1
        try:
            yield InMemoryConnection(self.store)
        finally:
            self.released += 1


class InMemoryCarRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def list_available(self, conn) -> List[Car]:
        return [Car(**row) for row in self.store.cars.values() if row["available"]]

    async def set_availability(self, car_id: int, available: bool, conn) -> int:
        row = self.store.cars.get(car_id)
        if row is None:
            return 0
        row["available"] = available
        return 1


class InMemoryCustomerRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def list_all(self, conn) -> List[Customer]:
        return [Customer(**row) for row in self.store.customers.values()]

    async def create(self, customer: CustomerCreate, conn) -> Customer:
        customer_id = self.store._next_id("customers")
        row = {"id": customer_id, **customer.model_dump()}
        self.store.customers[customer_id] = row
        return Customer(**row)


class InMemoryRentalRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create(self, rental: RentalCreate, conn) -> Rental:
        if rental.customer_id not in self.store.customers or rental.car_id not in self.store.cars:
            raise RuntimeError('insert or update on table "rentals" violates foreign key constraint')
        rental_id = self.store._next_id("rentals")
        self.store.rentals[rental_id] = {
            "id": rental_id,
            "customer_id": rental.customer_id,
            "car_id": rental.car_id,
            "rental_date": rental.rental_date,
            "return_date": None,
            "total_price": None,
        }
        return Rental(id=rental_id, **rental.model_dump())

    async def close(self, rental_id: int, return_date: date, total_price: Decimal, conn) -> int:
        row = self.store.rentals.get(rental_id)
        if row is None:
            return 0
        row["return_date"] = return_date
        row["total_price"] = total_price
        return 1

    async def get_car_id(self, rental_id: int, conn) -> Optional[int]:
        row = self.store.rentals.get(rental_id)
        return row["car_id"] if row else None

    def _joined(self, row):
        car = self.store.cars[row["car_id"]]
        customer = self.store.customers[row["customer_id"]]
        return car, customer

    async def list_active(self, conn) -> List[ActiveRental]:
        result = []
        for row in self.store.rentals.values():
            if row["return_date"] is not None:
                continue
            car, customer = self._joined(row)
            result.append(ActiveRental(
                brand=car["brand"], model=car["model"], name=customer["name"],
                rental_date=row["rental_date"], id=row["id"], price_per_day=car["price_per_day"],
            ))
        return result

    async def list_history(self, conn) -> List[RentalHistoryEntry]:
        result = []
        for row in self.store.rentals.values():
            car, customer = self._joined(row)
            result.append(RentalHistoryEntry(
                id=row["id"], rental_date=row["rental_date"], return_date=row["return_date"],
                total_price=row["total_price"], name=customer["name"],
                model=car["model"], brand=car["brand"],
            ))
        return result


@pytest.fixture
def store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_car("Toyota", "Corolla", 45.0)
    store.add_car("Honda", "Civic", 50.0)
    store.add_car("Ford", "Focus", 40.0, available=False)
    return store


@pytest.fixture
def in_memory_service(store) -> RentalService:
    """RentalService wired to the in-memory store."""
    return RentalService(
        pool=InMemoryPool(store),
        car_repo=InMemoryCarRepository(store),
        customer_repo=InMemoryCustomerRepository(store),
        rental_repo=InMemoryRentalRepository(store),
        api_name="[test-api]",
    )
