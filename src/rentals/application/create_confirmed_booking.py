"""Application service: Create Confirmed Booking use case.

Creates a CONFIRMED booking directly, without a prior hold.  The order
behind it is already paid, so availability is deliberately not a gate
here: an overbooking is logged for the merchant, not refused.
"""

from __future__ import annotations

import logging

from rentals.application.check_availability import assess_availability
from rentals.application.dto import BookingDTO, booking_to_dto
from rentals.application.events import flush_events
from rentals.domain.clock import Clock, utc_now
from rentals.domain.identity import new_id
from rentals.domain.model.booking import Booking, FulfillmentMethod
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import Ok, Result, not_found

logger = logging.getLogger(__name__)


class CreateConfirmedBookingHandler:

    def __init__(
        self,
        booking_repo: BookingRepository,
        item_repo: RentalItemRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._booking_repo = booking_repo
        self._item_repo = item_repo
        self._clock = clock

    async def handle(
        self,
        rental_item_id: str,
        order_id: str,
        start_date: object,
        end_date: object,
        units: int,
        fulfillment_method: FulfillmentMethod = FulfillmentMethod.UNKNOWN,
    ) -> Result[BookingDTO]:
        date_range = DateRange.create(start_date, end_date)
        if not isinstance(date_range, Ok):
            return date_range

        item = await self._item_repo.get_by_id(rental_item_id)
        if item is None:
            return not_found(f"Rental item '{rental_item_id}' not found")

        now = self._clock()
        booking = Booking.create_confirmed(
            booking_id=new_id(),
            rental_item_id=item.id,
            order_id=order_id,
            date_range=date_range.value,
            units=units,
            fulfillment_method=fulfillment_method,
            now=now,
        )
        if not isinstance(booking, Ok):
            return booking

        report = await assess_availability(
            self._booking_repo, item, date_range.value, units, now
        )
        if not report.available:
            logger.warning(
                "Order %s overbooks %s for %s: %d requested, %d available",
                order_id,
                item.display_name,
                date_range.value,
                units,
                report.available_units,
            )

        await self._booking_repo.save(booking.value)
        flush_events(booking.value)
        return Ok(booking_to_dto(booking.value))
