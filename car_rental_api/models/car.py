"""Car model."""

from pydantic import BaseModel


class Car(BaseModel):
    """A car in the rental fleet."""

    id: int
    brand: str
    model: str
    price_per_day: float
    available: bool
