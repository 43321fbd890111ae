"""Customer models."""

from typing import Optional

from pydantic import BaseModel


class CustomerCreate(BaseModel):
    """Request body for adding a customer. No format checks on email or phone."""

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class Customer(CustomerCreate):
    """Customer record."""

    id: int
