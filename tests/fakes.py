import asyncio
from datetime import datetime, timezone
from itertools import count

from gowheels.models.booking import StoredBooking

# Sunday 1 June 2025, mid afternoon
FIXED_NOW = datetime(2025, 6, 1, 15, 30, tzinfo=timezone.utc)

VALID_PAYLOAD = {
    "name": "Alex",
    "email": "a@b.com",
    "carModel": "Sedan",
    "phone": "555-0100",
}


class FakeRepository:
    def __init__(self, error: Exception = None):
        self.error = error
        self.saved = []
        self._ids = count(1)

    async def connect(self):
        return True

    async def save(self, booking):
        if self.error:
            raise self.error
        stored = StoredBooking(id=next(self._ids), createdAt=FIXED_NOW, **booking.model_dump())
        self.saved.append(stored)
        return stored


class FakeNotifier:
    def __init__(self, error: Exception = None, delay: float = 0):
        self.error = error
        self.delay = delay
        self.sent = []

    async def verify(self):
        return True

    async def send(self, message):
        self.sent.append(message)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
