"""FastAPI application for the Car Rental API."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import load_config, apply_log_level
from .constants import API_NAME, CAR_RETURNED, MISSING_REQUIRED_FIELDS, RENTAL_COMPLETED
from .exceptions import RentalNotFoundError
from .models import (
    ActiveRental,
    Car,
    Customer,
    CustomerCreate,
    MessageResponse,
    Rental,
    RentalCreate,
    RentalHistoryEntry,
    RentalReturnRequest,
    RentalReturnResponse,
)
from .repository import apply_schema, close_connection_pool, get_connection_pool
from .service import RentalService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Global service instance, initialized in lifespan or on first request
_service: RentalService | None = None


async def get_service() -> RentalService:
    """Get or initialize the service with its connection pool (singleton pattern)."""
    global _service

    if _service is None:
        config = load_config()
        apply_log_level(config.log_level)

        pool = await get_connection_pool(config)
        if config.init_schema:
            await apply_schema(pool)

        _service = RentalService(pool)
        logger.info(f"{API_NAME} Service initialized (database: {config.database_endpoint})")

    return _service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the pool on startup and close it on shutdown."""
    global _service
    try:
        app.state.service = await get_service()
    except Exception as e:
        logger.error(f"{API_NAME} Failed to initialize service on startup: {e}", exc_info=True)
        raise

    yield

    _service = None
    await close_connection_pool()
    logger.info(f"{API_NAME} Connection pool closed")


app = FastAPI(title="Car Rental API", version=__version__, lifespan=lifespan)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, error: str, **extra: Any) -> JSONResponse:
    """Create an error response of the form ``{"error": ...}``."""
    body: Dict[str, Any] = {"error": error}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def _store_error(action: str, e: Exception) -> JSONResponse:
    logger.error(f"{API_NAME} Error {action}: {e}", exc_info=True)
    return _error_response(500, str(e))


def _received_body(body: Any) -> Any:
    if isinstance(body, (bytes, bytearray)):
        return body.decode("utf-8", errors="replace")
    return body


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map request validation failures to 400, echoing what was received."""
    errors = exc.errors()
    missing = any(err.get("type") == "missing" or err.get("input", "") is None for err in errors)
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
            "message": err.get("msg", ""),
        }
        for err in errors
    ]
    logger.warning(f"{API_NAME} Invalid request to {request.url.path}: {details}")
    return _error_response(
        400,
        MISSING_REQUIRED_FIELDS if missing else "Invalid request",
        received=_received_body(exc.body),
        details=details,
    )


@app.get("/api/health")
async def health_check():
    """Health check with a database connectivity test."""
    try:
        service = await get_service()
        await service.ping()
    except Exception as e:
        logger.error(f"{API_NAME} Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "message": "Database connection failed",
                "error": str(e),
            },
        )
    return {
        "status": "healthy",
        "message": "Car Rental API is healthy",
        "database": "connected",
    }


@app.get("/api/cars", response_model=List[Car])
async def list_available_cars():
    """List cars that are not currently rented."""
    try:
        service = await get_service()
        return await service.list_available_cars()
    except Exception as e:
        return _store_error("fetching cars", e)


@app.get("/api/customers", response_model=List[Customer])
async def list_customers():
    try:
        service = await get_service()
        return await service.list_customers()
    except Exception as e:
        return _store_error("fetching customers", e)


@app.post("/api/customers", response_model=Customer)
async def create_customer(customer: CustomerCreate):
    try:
        service = await get_service()
        return await service.create_customer(customer)
    except Exception as e:
        return _store_error("adding new customer", e)


@app.post("/api/rentals", response_model=Rental)
async def create_rental(rental: RentalCreate):
    """Create a rental and mark the car unavailable."""
    logger.info(
        f"{API_NAME} Rental request: customer={rental.customer_id} car={rental.car_id} date={rental.rental_date}"
    )
    try:
        service = await get_service()
        return await service.create_rental(rental)
    except Exception as e:
        return _store_error("creating new rental", e)


@app.get("/api/rentals/active", response_model=List[ActiveRental])
async def list_active_rentals():
    try:
        service = await get_service()
        return await service.list_active_rentals()
    except Exception as e:
        return _store_error("fetching active rentals", e)


@app.post("/api/rentals/return", response_model=RentalReturnResponse)
async def complete_rental(request: RentalReturnRequest):
    """Close a rental with its return date and total price, then release the car."""
    logger.info(
        f"{API_NAME} Return request received: rental={request.rental_id} "
        f"date={request.return_date} total={request.total_price}"
    )
    try:
        service = await get_service()
        await service.return_rental(
            request.rental_id,
            return_date=request.return_date,
            total_price=request.total_price,
        )
    except RentalNotFoundError as e:
        return JSONResponse(status_code=404, content=e.to_body(include_id=True))
    except Exception as e:
        return _store_error("completing rental", e)

    return RentalReturnResponse(
        message=RENTAL_COMPLETED,
        return_date=request.return_date,
        amount_paid=float(request.total_price),
    )


@app.post("/api/rentals/{rental_id}/return", response_model=MessageResponse)
async def return_car(rental_id: int):
    """Make the rental's car available again without closing the rental."""
    try:
        service = await get_service()
        await service.return_rental(rental_id)
    except RentalNotFoundError as e:
        return JSONResponse(status_code=404, content=e.to_body())
    except Exception as e:
        return _store_error("returning car", e)

    return MessageResponse(message=CAR_RETURNED)


@app.get("/api/rentals/history", response_model=List[RentalHistoryEntry])
async def rental_history():
    try:
        service = await get_service()
        return await service.rental_history()
    except Exception as e:
        return _store_error("fetching rental history", e)


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    config = load_config()
    uvicorn.run(
        "car_rental_api.app:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level if config.log_level != "warn" else "warning",
        reload=False,
        loop="asyncio",
    )


if __name__ == "__main__":
    main()
