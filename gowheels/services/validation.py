"""
Normalization and validation of incoming booking requests.

Everything here is pure: the current time and the service timezone are passed
in, so the rules can be checked without touching the wall clock.
"""
import math
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, List, Optional, Tuple

from gowheels.models.booking import BookingRequest, NormalizedBooking
from gowheels.models.errors import (
    InvalidDateError,
    MissingFieldError,
    PickupInPastError,
    ReturnBeforePickupError,
)

REQUIRED_FIELDS = ("name", "email", "carModel", "phone")
DEFAULT_RENTAL_PERIOD = timedelta(hours=24)


def missing_fields(request: BookingRequest) -> List[str]:
    """Returns the required fields that are absent, blank or not text."""
    missing = []
    for field in REQUIRED_FIELDS:
        value = getattr(request, field)
        if not isinstance(value, str) or not value.strip():
            missing.append(field)
    return missing


def _localize(value: datetime, tz: tzinfo) -> datetime:
    # Naive values are wall-clock time of the service timezone
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def parse_booking_date(value: Any, tz: tzinfo, field: str = "pickupDate") -> Optional[datetime]:
    """
    Parses a client supplied date into an aware datetime.

    Accepts datetime/date objects, ISO 8601 strings (date only or date-time,
    optionally with a 'Z' or offset suffix) and epoch milliseconds.
    Returns None when the value is omitted (None or empty string).
    Raises InvalidDateError for anything else.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return _localize(value, tz)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)

    if isinstance(value, bool):
        raise InvalidDateError(field, value)

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidDateError(field, value)
        try:
            return datetime.fromtimestamp(value / 1000, tz=tz)
        except (OverflowError, OSError, ValueError):
            raise InvalidDateError(field, value)

    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise InvalidDateError(field, value)
        return _localize(parsed, tz)

    raise InvalidDateError(field, value)


def resolve_booking_dates(
    pickup: Optional[datetime],
    return_date: Optional[datetime],
    now: datetime,
) -> Tuple[datetime, datetime]:
    """
    Fills in omitted dates: pickup defaults to now, return to pickup + 24h.
    Raises InvalidDateError when the default return date is out of range.
    """
    if pickup is None:
        pickup = now
    if return_date is None:
        try:
            return_date = pickup + DEFAULT_RENTAL_PERIOD
        except OverflowError:
            # pickup within a day of datetime.max
            raise InvalidDateError("returnDate", pickup)
    return pickup, return_date


def start_of_day(now: datetime, tz: tzinfo) -> datetime:
    local_now = _localize(now, tz).astimezone(tz)
    return local_now.replace(hour=0, minute=0, second=0, microsecond=0)


def validate_booking(request: BookingRequest, now: datetime, tz: tzinfo) -> NormalizedBooking:
    """
    Checks a booking request and returns the booking ready to be stored.

    Raises:
        MissingFieldError: name, email, carModel or phone is missing.
        InvalidDateError: a supplied date cannot be parsed.
        PickupInPastError: pickup is before the start of today.
        ReturnBeforePickupError: return is before pickup.
    """
    missing = missing_fields(request)
    if missing:
        raise MissingFieldError(missing)

    now = _localize(now, tz)
    pickup = parse_booking_date(request.pickupDate, tz, "pickupDate")
    return_date = parse_booking_date(request.returnDate, tz, "returnDate")
    pickup, return_date = resolve_booking_dates(pickup, return_date, now)

    if pickup < start_of_day(now, tz):
        raise PickupInPastError()
    if pickup > return_date:
        raise ReturnBeforePickupError()

    return NormalizedBooking(
        name=request.name,
        email=request.email,
        carModel=request.carModel,
        phone=request.phone,
        pickupDate=pickup,
        returnDate=return_date,
    )
