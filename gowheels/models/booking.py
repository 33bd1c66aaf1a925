from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from gowheels.models.errors import BookingValidationError

# --- Incoming Request Models ---

class BookingRequest(BaseModel):
    # Raw client input: types are checked by the validator, not here
    model_config = ConfigDict(extra="ignore")

    name: Any = None
    email: Any = None
    carModel: Any = None
    phone: Any = None
    pickupDate: Any = None
    returnDate: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> "BookingRequest":
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)


# --- Domain Models ---

class NormalizedBooking(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    carModel: str
    phone: str
    pickupDate: datetime
    returnDate: datetime


class StoredBooking(NormalizedBooking):
    id: Optional[int] = None
    createdAt: datetime


class ConfirmationEmail(BaseModel):
    to: str
    subject: str
    html: str


# --- Outcome ---

class OutcomeStatus(str, Enum):
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class BookingOutcome:
    status: OutcomeStatus
    booking: Optional[StoredBooking] = None
    error: Optional[Exception] = None

    @classmethod
    def confirmed(cls, booking: StoredBooking) -> "BookingOutcome":
        return cls(OutcomeStatus.CONFIRMED, booking=booking)

    @classmethod
    def rejected(cls, error: BookingValidationError) -> "BookingOutcome":
        return cls(OutcomeStatus.REJECTED, error=error)

    @classmethod
    def failed(cls, error: Exception) -> "BookingOutcome":
        return cls(OutcomeStatus.FAILED, error=error)


# --- Outgoing Response Models ---

class BookingResponse(BaseModel):
    message: str
    booking: StoredBooking


class MessageResponse(BaseModel):
    message: str
    error: Optional[str] = None
