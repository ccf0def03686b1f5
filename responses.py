"""
Builders for the uniform response envelope.
"""
from typing import Any, Optional

from exceptions import GymServiceError
from models import GenericResponse
from utils import now_local

# Success messages
DEFAULT_SUCCESS_MESSAGE = "Operation completed successfully."
CLASS_CREATED_SUCCESS = "Class created successfully!"
BOOKING_SUCCESS = "Class booked successfully!"
NO_BOOKINGS_FOUND = "No bookings found for the given criteria."

# Error messages
DEFAULT_ERROR_MESSAGE = "An unexpected error occurred."
ERROR_CLASS_NOT_FOUND = "Class not found."
ERROR_BOOKING_FAILED = "Booking could not be created."
ERROR_CAPACITY_EXCEEDED = "Class capacity exceeded."

# Error codes
BOOKING_ERROR_CODE = "BOOKING_ERROR"
CLASS_CREATION_ERROR_CODE = "CLASS_CREATION_ERROR"
CLASS_LOOKUP_ERROR_CODE = "CLASS_LOOKUP_ERROR"
VALIDATION_ERROR_CODE = "VALIDATION_ERROR"
INTERNAL_ERROR_CODE = "INTERNAL_ERROR"


def _build(data: Any, message: str, success: bool, status_code: int,
           error_code: Optional[str]) -> GenericResponse:
    return GenericResponse(
        data=data,
        message=message,
        success=success,
        status_code=status_code,
        error_code=None if success else error_code,
        timestamp=now_local().replace(tzinfo=None, microsecond=0),
    )


def success(data: Any = None, message: str = DEFAULT_SUCCESS_MESSAGE,
            status_code: int = 200) -> GenericResponse:
    return _build(data, message, True, status_code, None)


def error(message: str, status_code: int = 400,
          error_code: Optional[str] = None) -> GenericResponse:
    return _build(None, message, False, status_code, error_code)


def from_exception(exc: GymServiceError, error_code: str) -> GenericResponse:
    return error(exc.message, exc.status_code, error_code)


def to_body(response: GenericResponse) -> dict:
    """JSON-ready dict with camelCase keys."""
    return response.model_dump(mode="json", by_alias=True)
