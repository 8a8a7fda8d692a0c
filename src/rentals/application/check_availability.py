"""Application service: Check Availability use case (query).

Loads the rental item and the bookings overlapping the requested window,
then lets the AvailabilityEngine decide.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from rentals.application.dto import AvailabilityDTO, availability_to_dto
from rentals.domain.clock import Clock, utc_now
from rentals.domain.model.rental_item import RentalItem
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import Ok, Result, not_found, validation_error
from rentals.domain.service.availability_engine import (
    AvailabilityEngine,
    AvailabilityReport,
)


def check_requested_units(units: object) -> Result[int]:
    if isinstance(units, bool) or not isinstance(units, int):
        return validation_error(f"Units must be an integer, got {units!r}", "InvalidUnits")
    if units < 1:
        return validation_error("Units must be at least 1", "InvalidUnits")
    return Ok(units)


async def assess_availability(
    booking_repo: BookingRepository,
    item: RentalItem,
    date_range: DateRange,
    units: int,
    now: datetime,
    exclude_ids: Iterable[str] = (),
) -> AvailabilityReport:
    """Run the engine over the stored bookings that overlap ``date_range``."""
    excluded = set(exclude_ids)
    candidates = await booking_repo.find_overlapping(item.id, date_range)
    return AvailabilityEngine().check_availability(
        item.quantity,
        date_range,
        units,
        [b for b in candidates if b.id not in excluded],
        now,
    )


class CheckAvailabilityHandler:

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
        start_date: object,
        end_date: object,
        requested_units: int = 1,
    ) -> Result[AvailabilityDTO]:
        units = check_requested_units(requested_units)
        if not isinstance(units, Ok):
            return units
        date_range = DateRange.create(start_date, end_date)
        if not isinstance(date_range, Ok):
            return date_range

        item = await self._item_repo.get_by_id(rental_item_id)
        if item is None:
            return not_found(f"Rental item '{rental_item_id}' not found")

        report = await assess_availability(
            self._booking_repo, item, date_range.value, units.value, self._clock()
        )
        return Ok(availability_to_dto(item.id, report))
