"""Repository layer for database operations."""

from .car_repo import CarRepository
from .customer_repo import CustomerRepository
from .rental_repo import RentalRepository
from .connection_pool import get_connection_pool, close_connection_pool
from .schema import apply_schema

__all__ = [
    "CarRepository",
    "CustomerRepository",
    "RentalRepository",
    "get_connection_pool",
    "close_connection_pool",
    "apply_schema",
]
