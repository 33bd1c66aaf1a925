"""Error taxonomy for booking submissions.

Validation errors are caused by the client and end up as a 400 response with
their message. PersistenceError and NotificationError come from the
infrastructure: the first turns into a generic 500, the second is only logged.
"""

from enum import Enum
from typing import List, Optional


class ErrorCode(str, Enum):
    MISSING_FIELD = "missing_field"
    INVALID_DATE = "invalid_date"
    PICKUP_IN_PAST = "pickup_in_past"
    RETURN_BEFORE_PICKUP = "return_before_pickup"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.MISSING_FIELD: "Name, email, car model, and phone are required.",
    ErrorCode.INVALID_DATE: "Invalid date.",
    ErrorCode.PICKUP_IN_PAST: "Pickup date cannot be in the past.",
    ErrorCode.RETURN_BEFORE_PICKUP: "Return date must be after pickup date.",
}


class BookingValidationError(Exception):
    """Raised when a booking request breaks one of the intake rules."""

    code: ErrorCode

    def __init__(self, message: Optional[str] = None):
        self.message = message or ERROR_MESSAGES[self.code]
        super().__init__(self.message)


class MissingFieldError(BookingValidationError):
    code = ErrorCode.MISSING_FIELD

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__()


class InvalidDateError(BookingValidationError):
    code = ErrorCode.INVALID_DATE

    def __init__(self, field: str, value: object = None):
        self.field = field
        self.value = value
        label = "pickup" if field == "pickupDate" else "return"
        super().__init__(f"Invalid {label} date.")


class PickupInPastError(BookingValidationError):
    code = ErrorCode.PICKUP_IN_PAST


class ReturnBeforePickupError(BookingValidationError):
    code = ErrorCode.RETURN_BEFORE_PICKUP


class PersistenceError(Exception):
    """The booking could not be stored."""


class NotificationError(Exception):
    """The confirmation email could not be delivered."""
