"""Application service: Mark Booking Returned use case."""

from __future__ import annotations

from rentals.application.dto import BookingDTO, booking_to_dto
from rentals.application.events import flush_events
from rentals.domain.clock import Clock, utc_now
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.result import Ok, Result, not_found


class MarkBookingReturnedHandler:

    def __init__(self, booking_repo: BookingRepository, clock: Clock = utc_now) -> None:
        self._booking_repo = booking_repo
        self._clock = clock

    async def handle(self, booking_id: str) -> Result[BookingDTO]:
        booking = await self._booking_repo.get_by_id(booking_id)
        if booking is None:
            return not_found(f"Booking {booking_id} not found")

        returned = booking.mark_returned(self._clock())
        if not isinstance(returned, Ok):
            return returned

        await self._booking_repo.save(booking)
        flush_events(booking)
        return Ok(booking_to_dto(booking))
