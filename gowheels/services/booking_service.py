import asyncio
from datetime import datetime, tzinfo
from typing import Callable, Optional, Protocol
from zoneinfo import ZoneInfo

from gowheels.core.config import Settings
from gowheels.core.logger import logger
from gowheels.models.booking import (
    BookingOutcome,
    BookingRequest,
    ConfirmationEmail,
    NormalizedBooking,
    StoredBooking,
)
from gowheels.models.errors import BookingValidationError
from gowheels.services.notification_service import build_confirmation_email
from gowheels.services.validation import validate_booking


class BookingStore(Protocol):
    async def save(self, booking: NormalizedBooking) -> StoredBooking: ...


class Notifier(Protocol):
    async def send(self, message: ConfirmationEmail) -> None: ...


class BookingService:
    """
    Runs one booking submission: validate, store, then notify the customer.

    Validation failures are returned as REJECTED and storage failures as FAILED.
    The confirmation email is best effort: if it fails or times out the booking
    is still CONFIRMED.
    """

    def __init__(
        self,
        repository: BookingStore,
        notifier: Notifier,
        tz: tzinfo,
        clock: Optional[Callable[[], datetime]] = None,
        notification_timeout: float = 10.0,
        company_name: str = "Go Wheels",
        cars_page_url: str = "",
    ):
        self.repository = repository
        self.notifier = notifier
        self.tz = tz
        self.clock = clock or (lambda: datetime.now(tz))
        self.notification_timeout = notification_timeout
        self.company_name = company_name
        self.cars_page_url = cars_page_url

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        repository: BookingStore,
        notifier: Notifier,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "BookingService":
        return cls(
            repository=repository,
            notifier=notifier,
            tz=ZoneInfo(settings.TIMEZONE),
            clock=clock,
            notification_timeout=settings.EMAIL_TIMEOUT_SECONDS,
            company_name=settings.COMPANY_NAME,
            cars_page_url=settings.CARS_PAGE_URL,
        )

    async def submit(self, request: BookingRequest) -> BookingOutcome:
        logger.info(f"📥 Booking Request - Car: {request.carModel}, Pickup: {request.pickupDate}, Return: {request.returnDate}")

        # 1. Validate
        try:
            booking = validate_booking(request, now=self.clock(), tz=self.tz)
        except BookingValidationError as e:
            logger.warning(f"🚫 Booking rejected ({e.code.value}): {e.message}")
            return BookingOutcome.rejected(e)

        # 2. Persist
        try:
            stored = await self.repository.save(booking)
        except Exception as e:
            logger.opt(exception=e).error(f"❌ Booking Error: {e}")
            return BookingOutcome.failed(e)

        # 3. Notify (best effort)
        await self.send_confirmation(stored)

        return BookingOutcome.confirmed(stored)

    async def send_confirmation(self, booking: StoredBooking) -> bool:
        """
        Sends the confirmation email. Returns whether it went out; never raises.
        """
        message = build_confirmation_email(
            booking,
            company_name=self.company_name,
            cars_page_url=self.cars_page_url,
        )
        try:
            await asyncio.wait_for(self.notifier.send(message), timeout=self.notification_timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(f"⚠ Email failed: no answer from mail server within {self.notification_timeout}s ({booking.email})")
        except Exception as e:
            logger.warning(f"⚠ Email failed: {e}")
        return False
