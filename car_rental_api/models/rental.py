"""Rental models for the Car Rental API."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ._dates import parse_flexible_date


class RentalCreate(BaseModel):
    """Request body for creating a rental."""

    customer_id: int
    car_id: int
    rental_date: date

    @field_validator("rental_date", mode="before")
    @classmethod
    def parse_rental_date(cls, v: Any) -> Optional[date]:
        return parse_flexible_date(v)


class Rental(RentalCreate):
    """Rental as returned after creation."""

    id: int


class RentalReturnRequest(BaseModel):
    """Request body for closing out a rental.

    All three fields are required; a missing or null value is a validation
    error. ``totalPrice`` of zero is accepted.
    """

    rental_id: int = Field(..., alias="rentalId")
    return_date: date = Field(..., alias="returnDate")
    total_price: Decimal = Field(..., alias="totalPrice", ge=0)

    @field_validator("return_date", mode="before")
    @classmethod
    def parse_return_date(cls, v: Any) -> Optional[date]:
        return parse_flexible_date(v)

    class Config:
        """Pydantic config."""
        populate_by_name = True


class RentalReturnResponse(BaseModel):
    """Confirmation for a completed rental."""

    message: str
    return_date: date = Field(..., alias="returnDate")
    amount_paid: float = Field(..., alias="amountPaid")

    class Config:
        """Pydantic config."""
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str


class ActiveRental(BaseModel):
    """Row of the active rentals report."""

    brand: str
    model: str
    name: str
    rental_date: date
    id: int
    price_per_day: float


class RentalHistoryEntry(BaseModel):
    """Row of the rental history report. Return fields are null while active."""

    id: int
    rental_date: date
    return_date: Optional[date] = None
    total_price: Optional[float] = None
    name: str
    model: str
    brand: str
