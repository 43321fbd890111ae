"""Shared constants for the Car Rental API."""

API_NAME = "[car-rental-api]"

# Table names
CARS_TABLE = "cars"
CUSTOMERS_TABLE = "customers"
RENTALS_TABLE = "rentals"

# Response messages
RENTAL_NOT_FOUND = "Rental not found"
RENTAL_NOT_FOUND_AFTER_UPDATE = "Rental not found after update"
RENTAL_COMPLETED = "Rental completed successfully"
CAR_RETURNED = "Car returned successfully"
MISSING_REQUIRED_FIELDS = "Missing required fields"
