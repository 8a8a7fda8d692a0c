"""Application service: Create Reservation use case.

Places a temporary cart hold (RESERVED, ``cart:<token>``) after
re-checking availability at call time.  The check and the save are not
atomic: two carts racing for the last unit can both succeed.  That risk
is accepted for short-lived holds.

Reserving again from the same cart for the same item and dates refreshes
the existing hold (units and expiry) instead of stacking a second one.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from rentals.application.check_availability import (
    assess_availability,
    check_requested_units,
)
from rentals.application.dto import BookingDTO, booking_to_dto
from rentals.application.events import flush_events
from rentals.domain.clock import Clock, utc_now
from rentals.domain.identity import new_id
from rentals.domain.model.booking import (
    DEFAULT_RESERVATION_TTL,
    Booking,
    BookingStatus,
    FulfillmentMethod,
    reserved_order_id,
)
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import (
    Ok,
    Result,
    capacity_exceeded,
    not_found,
    validation_error,
)

logger = logging.getLogger(__name__)


class CreateReservationHandler:

    def __init__(
        self,
        booking_repo: BookingRepository,
        item_repo: RentalItemRepository,
        clock: Clock = utc_now,
        reservation_ttl: timedelta = DEFAULT_RESERVATION_TTL,
    ) -> None:
        self._booking_repo = booking_repo
        self._item_repo = item_repo
        self._clock = clock
        self._ttl = reservation_ttl

    async def handle(
        self,
        rental_item_id: str,
        cart_token: str,
        start_date: object,
        end_date: object,
        units: int,
        fulfillment_method: FulfillmentMethod = FulfillmentMethod.UNKNOWN,
    ) -> Result[BookingDTO]:
        """Reserve ``units`` of an item for a cart.

        Steps:
        1. Validate input (fails before touching storage).
        2. Find an existing hold of this cart for the same dates.
        3. Re-check availability, ignoring that hold's own units.
        4. Refresh the hold, or create a new one, and persist it.
        """
        units_result = check_requested_units(units)
        if not isinstance(units_result, Ok):
            return units_result
        if not cart_token or not cart_token.strip():
            return validation_error("Cart token is required to reserve")
        date_range = DateRange.create(start_date, end_date)
        if not isinstance(date_range, Ok):
            return date_range

        item = await self._item_repo.get_by_id(rental_item_id)
        if item is None:
            return not_found(f"Rental item '{rental_item_id}' not found")

        now = self._clock()
        hold = await self._find_hold(item.id, cart_token.strip(), date_range.value)

        report = await assess_availability(
            self._booking_repo,
            item,
            date_range.value,
            units,
            now,
            exclude_ids=[hold.id] if hold else (),
        )
        if not report.available:
            logger.info(
                "Reservation refused for item=%s range=%s: requested=%d available=%d",
                item.id,
                date_range.value,
                units,
                report.available_units,
            )
            return capacity_exceeded(
                f"Not enough units of {item.display_name} available for "
                f"{date_range.value}. Requested: {units}, "
                f"Available: {report.available_units}"
            )

        if hold is not None:
            extended = hold.extend_hold(units, self._ttl, now)
            if not isinstance(extended, Ok):
                return extended
            hold.amend(fulfillment_method=fulfillment_method, now=now)
            await self._booking_repo.save(hold)
            logger.info("Refreshed hold %s until %s", hold.id, hold.expires_at)
            return Ok(booking_to_dto(hold))

        booking = Booking.reserve(
            booking_id=new_id(),
            rental_item_id=item.id,
            cart_token=cart_token,
            date_range=date_range.value,
            units=units,
            fulfillment_method=fulfillment_method,
            ttl=self._ttl,
            now=now,
        )
        if not isinstance(booking, Ok):
            return booking

        await self._booking_repo.save(booking.value)
        flush_events(booking.value)
        return Ok(booking_to_dto(booking.value))

    async def _find_hold(
        self, rental_item_id: str, cart_token: str, date_range: DateRange
    ) -> Booking | None:
        for booking in await self._booking_repo.find_by_order_id(
            reserved_order_id(cart_token)
        ):
            if (
                booking.rental_item_id == rental_item_id
                and booking.date_range == date_range
                and booking.status == BookingStatus.RESERVED
            ):
                return booking
        return None
