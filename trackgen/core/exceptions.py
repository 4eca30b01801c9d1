"""
Custom exception handlers and error types
"""

from datetime import datetime, timezone
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


class TrackingNumberError(Exception):
    """Base exception for the tracking number service"""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class StoreUnavailableError(TrackingNumberError):
    """Raised by uniqueness store adapters when the backing store fails or times out.

    Never used for uniqueness conflicts; those are reported as
    ``InsertResult.CONFLICT``.
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, "STORE_UNAVAILABLE")
        self.operation = operation


class TrackingNumberGenerationError(TrackingNumberError):
    """Generation finished without an accepted tracking number.

    Args:
        message (str): Error message
        attempts (int): Attempts consumed before giving up
        elapsed_ms (float): Wall-clock time of the whole call
    """

    def __init__(self, message: str, attempts: int = 0, elapsed_ms: float = 0.0):
        super().__init__(message, "TRACKING_NUMBER_GENERATION_FAILED")
        self.attempts = attempts
        self.elapsed_ms = elapsed_ms


class GenerationExhaustedError(TrackingNumberGenerationError):
    """Exception raised when every attempt collided"""


class GenerationStoreError(TrackingNumberGenerationError):
    """Exception raised when the uniqueness store failed during generation"""


class ShipmentValidationError(TrackingNumberError):
    """Exception raised when shipment attributes fail validation"""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors), "INVALID_REQUEST_PARAMETER")
        self.errors = list(errors)


def _error_body(code: str, message: str) -> dict:
    return {
        "error": code,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def generation_exception_handler(
    request: Request, exc: TrackingNumberGenerationError
):
    """Handle exhausted / store failures"""
    logger.error(
        "Tracking number generation failed: %s (attempts=%d elapsed=%.3fms)",
        exc.message,
        exc.attempts,
        exc.elapsed_ms,
    )
    return JSONResponse(
        status_code=500,
        content=_error_body("TRACKING_NUMBER_GENERATION_FAILED", exc.message),
    )


async def shipment_validation_exception_handler(
    request: Request, exc: ShipmentValidationError
):
    """Handle field-level validation errors"""
    logger.warning("Invalid request parameter: %s", exc.message)
    return JSONResponse(
        status_code=400,
        content=_error_body("INVALID_REQUEST_PARAMETER", exc.message),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle missing or mistyped query parameters"""
    logger.warning(f"Validation error: {exc.errors()}")
    lines = []
    for err in exc.errors():
        loc = err.get("loc", [])
        name = loc[-1] if loc else "request"
        lines.append(f"Invalid value for parameter '{name}': {err.get('msg', 'invalid')}")
    return JSONResponse(
        status_code=400,
        content=_error_body("INVALID_PARAMETER_TYPE", "; ".join(lines)),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.error("Unexpected error occurred: %s", type(exc).__name__, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=_error_body("INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
    )
