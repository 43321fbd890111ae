"""Service layer."""

from .rental_service import RentalService

__all__ = ["RentalService"]
