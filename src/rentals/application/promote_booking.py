"""Application service: Promote Booking by date match.

Fallback for paid orders that lost their booking reference: find a
RESERVED booking for the same item and the exact same dates and confirm
it.  Finding nothing is not an error; the handler returns ``Ok(None)``
so callers can tell "nothing to promote" apart from a failure.
"""

from __future__ import annotations

from rentals.application.dto import BookingDTO, booking_to_dto
from rentals.application.events import flush_events
from rentals.domain.clock import Clock, utc_now
from rentals.domain.model.booking import (
    Booking,
    BookingStatus,
    FulfillmentMethod,
    reserved_order_id,
)
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.result import Ok, Result, validation_error


class PromoteBookingByDatesHandler:

    def __init__(self, booking_repo: BookingRepository, clock: Clock = utc_now) -> None:
        self._booking_repo = booking_repo
        self._clock = clock

    async def handle(
        self,
        rental_item_id: str,
        start_date: object,
        end_date: object,
        order_id: str,
        units: int | None = None,
        fulfillment_method: FulfillmentMethod | None = None,
        cart_token: str | None = None,
    ) -> Result[BookingDTO | None]:
        """Confirm the oldest matching RESERVED booking.

        With ``cart_token`` only that cart's hold is considered.
        """
        if not order_id or not order_id.strip():
            return validation_error("Order ID is required to promote a booking")
        date_range = DateRange.create(start_date, end_date)
        if not isinstance(date_range, Ok):
            return date_range

        booking = await self._find_match(rental_item_id, date_range.value, cart_token)
        if booking is None:
            return Ok(None)

        now = self._clock()
        amended = booking.amend(units, fulfillment_method, now)
        if not isinstance(amended, Ok):
            return amended
        confirmed = booking.confirm(order_id, now)
        if not isinstance(confirmed, Ok):
            return confirmed

        await self._booking_repo.save(booking)
        flush_events(booking)
        return Ok(booking_to_dto(booking))

    async def _find_match(
        self, rental_item_id: str, date_range: DateRange, cart_token: str | None
    ) -> Booking | None:
        candidates = await self._booking_repo.find_overlapping(rental_item_id, date_range)
        matches = [
            b
            for b in candidates
            if b.status == BookingStatus.RESERVED and b.date_range == date_range
        ]
        if cart_token:
            hold_id = reserved_order_id(cart_token.strip())
            matches = [b for b in matches if b.order_id == hold_id]
        if not matches:
            return None
        return min(matches, key=lambda b: b.created_at)
