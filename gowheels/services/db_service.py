from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import AsyncClient, create_async_client

from gowheels.core.config import Settings
from gowheels.core.logger import logger
from gowheels.models.booking import NormalizedBooking, StoredBooking
from gowheels.models.errors import PersistenceError


def booking_to_row(booking: NormalizedBooking, created_at: datetime) -> Dict[str, Any]:
    return {
        "name": booking.name,
        "email": booking.email,
        "car_model": booking.carModel,
        "phone": booking.phone,
        "pickup_date": booking.pickupDate.isoformat(),
        "return_date": booking.returnDate.isoformat(),
        "created_at": created_at.isoformat(),
    }


def row_to_booking(row: Dict[str, Any]) -> StoredBooking:
    return StoredBooking(
        id=row.get("id"),
        name=row["name"],
        email=row["email"],
        carModel=row["car_model"],
        phone=row["phone"],
        pickupDate=row["pickup_date"],
        returnDate=row["return_date"],
        createdAt=row["created_at"],
    )


class BookingRepository:
    """Stores bookings in the Supabase `bookings` table."""

    def __init__(self, settings: Settings, client: Optional[AsyncClient] = None):
        self.url = settings.SUPABASE_URL
        self.key = settings.SUPABASE_KEY
        self.table = settings.BOOKINGS_TABLE
        self._client = client

    async def get_client(self) -> AsyncClient:
        if not self._client:
            if not self.url or not self.key:
                raise PersistenceError("Supabase credentials missing (SUPABASE_URL / SUPABASE_KEY).")
            try:
                self._client = await create_async_client(self.url, self.key)
                logger.info("✅ Supabase Async client initialized")
            except Exception as e:
                raise PersistenceError(f"Failed to initialize Supabase client: {e}") from e
        return self._client

    async def connect(self) -> bool:
        """
        Startup check. Never raises: the service still starts without a database,
        bookings will fail with a 500 until it is reachable.
        """
        try:
            client = await self.get_client()
            await client.table(self.table).select("id").limit(1).execute()
            logger.info("✅ Supabase connected")
            return True
        except Exception as e:
            logger.error(f"❌ Supabase Error: {e}")
            return False

    async def save(self, booking: NormalizedBooking) -> StoredBooking:
        """
        Inserts the booking and returns the stored row (with id and created_at).
        Raises PersistenceError on any failure.
        """
        client = await self.get_client()
        row = booking_to_row(booking, created_at=datetime.now(timezone.utc))

        try:
            response = await client.table(self.table).insert(row).execute()
        except Exception as e:
            raise PersistenceError(f"Insert into '{self.table}' failed: {e}") from e

        if not response.data:
            raise PersistenceError(f"Insert into '{self.table}' returned no data.")

        stored = row_to_booking(response.data[0])
        logger.info(f"📝 Booking {stored.id} saved for {stored.email}")
        return stored
