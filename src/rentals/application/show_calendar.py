"""Application service: Show Calendar use case (query).

Lists the bookings of one rental item that touch a calendar month, for
the merchant's booking calendar.  Expired holds are swept first, since
this is the place a merchant would notice them.
"""

from __future__ import annotations

import calendar
from datetime import date

from rentals.application.cleanup_expired import CleanupExpiredReservationsHandler
from rentals.application.dto import CalendarBookingDTO, CalendarDTO
from rentals.domain.clock import Clock, utc_now
from rentals.domain.model.booking import BookingStatus
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import Err, Ok, Result, not_found, validation_error

MIN_YEAR = 2000
MAX_YEAR = 2100


class ShowCalendarHandler:

    def __init__(
        self,
        booking_repo: BookingRepository,
        item_repo: RentalItemRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._booking_repo = booking_repo
        self._item_repo = item_repo
        self._clock = clock
        self._cleanup = CleanupExpiredReservationsHandler(booking_repo, clock)

    async def handle(self, rental_item_id: str, year: int, month: int) -> Result[CalendarDTO]:
        if not isinstance(year, int) or not MIN_YEAR <= year <= MAX_YEAR:
            return validation_error(
                f"Year must be between {MIN_YEAR} and {MAX_YEAR}", "InvalidDate"
            )
        if not isinstance(month, int) or not 1 <= month <= 12:
            return validation_error("Month must be between 1 and 12", "InvalidDate")

        item = await self._item_repo.get_by_id(rental_item_id)
        if item is None:
            return not_found(f"Rental item '{rental_item_id}' not found")

        swept = await self._cleanup.handle()
        if isinstance(swept, Err):
            return swept

        last_day = calendar.monthrange(year, month)[1]
        month_range = DateRange(date(year, month, 1), date(year, month, last_day))

        now = self._clock()
        bookings = [
            b
            for b in await self._booking_repo.find_overlapping(item.id, month_range)
            if b.status != BookingStatus.CANCELLED
            and not (b.status == BookingStatus.RESERVED and b.is_expired(now))
        ]
        bookings.sort(key=lambda b: (b.date_range.start_date, b.created_at))

        return Ok(
            CalendarDTO(
                rental_item_id=item.id,
                year=year,
                month=month,
                bookings=[
                    CalendarBookingDTO(
                        id=b.id,
                        start_date=b.date_range.start_date.isoformat(),
                        end_date=b.date_range.end_date.isoformat(),
                        units=b.units,
                        rental_item_name=item.display_name,
                        status=b.status.value,
                        fulfillment_method=b.fulfillment_method.value,
                        order_id=b.order_id,
                    )
                    for b in bookings
                ],
            )
        )
