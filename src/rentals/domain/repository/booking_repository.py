"""Abstract repository for Booking aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  All methods are coroutines: storage I/O is the only
place the core suspends.  A single ``save`` is assumed to be atomic; no
cross-aggregate transactions are assumed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from rentals.domain.model.booking import Booking
from rentals.domain.model.value_objects import DateRange


class BookingRepository(ABC):

    @abstractmethod
    async def get_by_id(self, booking_id: str) -> Booking | None:
        """Return a booking by its ID, or None if not found."""

    @abstractmethod
    async def find_by_order_id(self, order_id: str) -> list[Booking]:
        """Return every booking carrying the given order ID."""

    @abstractmethod
    async def find_overlapping(
        self, rental_item_id: str, date_range: DateRange
    ) -> list[Booking]:
        """Return bookings of an item whose dates overlap the range, any status."""

    @abstractmethod
    async def find_reserved_by_rental_item(self, rental_item_id: str) -> list[Booking]:
        """Return RESERVED bookings of an item, expired or not."""

    @abstractmethod
    async def find_expired(self, as_of: datetime) -> list[Booking]:
        """Return RESERVED bookings whose expiry is before ``as_of``."""

    @abstractmethod
    async def save(self, booking: Booking) -> None:
        """Persist a new or updated booking."""

    @abstractmethod
    async def save_many(self, bookings: list[Booking]) -> None:
        """Persist several bookings."""

    @abstractmethod
    async def delete(self, booking_id: str) -> None:
        """Remove a booking.  Unknown IDs are ignored."""

    @abstractmethod
    async def delete_many(self, booking_ids: list[str]) -> None:
        """Remove several bookings.  Unknown IDs are ignored."""
