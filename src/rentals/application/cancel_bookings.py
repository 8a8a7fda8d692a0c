"""Application services: bulk cancellation.

* Cancel by order: the platform cancelled an order, so every booking
  carrying its id is cancelled.
* Cancel reserved by item: the product was deleted or stopped being
  rentable, so its open cart holds are cancelled.  Confirmed bookings
  are left alone; the merchant settles those with the customer.

Bookings that cannot be cancelled (already cancelled, returned) are
skipped, so replaying either operation is harmless.
"""

from __future__ import annotations

import logging

from rentals.application.dto import CancellationDTO
from rentals.application.events import flush_events
from rentals.domain.clock import Clock, utc_now
from rentals.domain.model.booking import Booking
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.result import Ok, Result, validation_error

logger = logging.getLogger(__name__)

ORDER_CANCELLED_REASON = "Order cancelled"
PRODUCT_DELETED_REASON = "Product deleted"


async def _cancel_all(
    booking_repo: BookingRepository,
    bookings: list[Booking],
    reason: str,
    clock: Clock,
) -> CancellationDTO:
    now = clock()
    cancelled: list[Booking] = []
    for booking in bookings:
        result = booking.cancel(reason, now)
        if isinstance(result, Ok):
            cancelled.append(booking)
        else:
            logger.debug("Skipping booking %s: %s", booking.id, result.message)

    if cancelled:
        await booking_repo.save_many(cancelled)
        flush_events(*cancelled)
    return CancellationDTO(
        cancelled_count=len(cancelled),
        booking_ids=[b.id for b in cancelled],
    )


class CancelBookingsByOrderHandler:

    def __init__(self, booking_repo: BookingRepository, clock: Clock = utc_now) -> None:
        self._booking_repo = booking_repo
        self._clock = clock

    async def handle(
        self, order_id: str, reason: str = ORDER_CANCELLED_REASON
    ) -> Result[CancellationDTO]:
        if not order_id or not order_id.strip():
            return validation_error("Order ID is required to cancel bookings")

        bookings = await self._booking_repo.find_by_order_id(order_id.strip())
        summary = await _cancel_all(self._booking_repo, bookings, reason, self._clock)
        logger.info(
            "Order %s cancelled: %d booking(s) cancelled",
            order_id,
            summary.cancelled_count,
        )
        return Ok(summary)


class CancelReservedBookingsByRentalItemHandler:

    def __init__(self, booking_repo: BookingRepository, clock: Clock = utc_now) -> None:
        self._booking_repo = booking_repo
        self._clock = clock

    async def handle(
        self, rental_item_id: str, reason: str = PRODUCT_DELETED_REASON
    ) -> Result[CancellationDTO]:
        if not rental_item_id:
            return validation_error("Rental item ID is required")

        bookings = await self._booking_repo.find_reserved_by_rental_item(rental_item_id)
        summary = await _cancel_all(self._booking_repo, bookings, reason, self._clock)
        logger.info(
            "Rental item %s: %d reserved booking(s) cancelled",
            rental_item_id,
            summary.cancelled_count,
        )
        return Ok(summary)
