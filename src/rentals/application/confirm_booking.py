"""Application service: Confirm Booking by reference.

Preferred path when the paid order still carries the booking id that was
handed out at reservation time.  Payment webhooks are retried, so a
booking that is already CONFIRMED for the same order is reported as a
success without emitting a second confirmation.
"""

from __future__ import annotations

import logging

from rentals.application.dto import BookingDTO, booking_to_dto
from rentals.application.events import flush_events
from rentals.domain.clock import Clock, utc_now
from rentals.domain.model.booking import BookingStatus, FulfillmentMethod
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.result import Ok, Result, not_found, validation_error

logger = logging.getLogger(__name__)


class ConfirmBookingHandler:

    def __init__(self, booking_repo: BookingRepository, clock: Clock = utc_now) -> None:
        self._booking_repo = booking_repo
        self._clock = clock

    async def handle(
        self,
        booking_id: str,
        order_id: str,
        units: int | None = None,
        fulfillment_method: FulfillmentMethod | None = None,
    ) -> Result[BookingDTO]:
        if not order_id or not order_id.strip():
            return validation_error("Order ID is required to confirm booking")
        order_id = order_id.strip()

        booking = await self._booking_repo.get_by_id(booking_id)
        if booking is None:
            return not_found(f"Booking {booking_id} not found")

        if booking.status == BookingStatus.CONFIRMED and booking.order_id == order_id:
            logger.info("Booking %s already confirmed for order %s", booking.id, order_id)
            return Ok(booking_to_dto(booking))

        now = self._clock()
        if booking.status == BookingStatus.RESERVED:
            amended = booking.amend(units, fulfillment_method, now)
            if not isinstance(amended, Ok):
                return amended

        confirmed = booking.confirm(order_id, now)
        if not isinstance(confirmed, Ok):
            return confirmed

        await self._booking_repo.save(booking)
        flush_events(booking)
        return Ok(booking_to_dto(booking))
