"""Exceptions for the Car Rental API."""

from typing import Optional

from .constants import RENTAL_NOT_FOUND


class RentalNotFoundError(Exception):
    """Exception raised when a rental id does not match any row."""
    def __init__(self, rental_id: int, message: str = None):
        self.rental_id = rental_id
        self.message = message or RENTAL_NOT_FOUND
        super().__init__(self.message)

    def to_body(self, include_id: bool = False) -> dict:
        body = {"error": self.message}
        if include_id:
            body["rentalId"] = self.rental_id
        return body


class ConfigurationError(Exception):
    """Exception raised when the environment holds an unusable setting."""
    def __init__(self, name: str, value: Optional[str] = None):
        self.name = name
        self.value = value
        super().__init__(f"Invalid value for {name}: {value!r}")
