"""Request and response models for the Car Rental API."""

from .car import Car
from .customer import Customer, CustomerCreate
from .rental import (
    ActiveRental,
    MessageResponse,
    Rental,
    RentalCreate,
    RentalHistoryEntry,
    RentalReturnRequest,
    RentalReturnResponse,
)

__all__ = [
    "Car",
    "Customer",
    "CustomerCreate",
    "Rental",
    "RentalCreate",
    "RentalReturnRequest",
    "RentalReturnResponse",
    "MessageResponse",
    "ActiveRental",
    "RentalHistoryEntry",
]
