"""
Business-rule errors raised inside the gym service operations.

Each operation catches these at its boundary and turns them into a failure
envelope, so they never reach the HTTP layer.
"""


class GymServiceError(Exception):
    """Base exception for gym service errors."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GymServiceError):
    """Input is malformed or logically inconsistent."""
    pass


class ConflictError(GymServiceError):
    """Class schedule overlaps an existing class."""
    pass


class NotFoundError(GymServiceError):
    """Referenced class does not exist."""
    status_code = 404


class CapacityError(GymServiceError):
    """Booking would exceed the class capacity."""
    pass


class InternalError(GymServiceError):
    """Unexpected or storage failure."""
    status_code = 500
