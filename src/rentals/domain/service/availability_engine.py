"""Domain service: Availability Engine.

Decides whether a number of units can be allocated for a date range,
given the item's total quantity and the bookings the caller fetched for
that window.  The engine never reads storage itself: callers must pass a
superset of the bookings that genuinely overlap the requested range.

A booking blocks units when it is active (CONFIRMED, or RESERVED and not
yet expired at ``now``) and its dates overlap the requested range.
CANCELLED and RETURNED bookings never block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from rentals.domain.clock import utc_now
from rentals.domain.model.booking import Booking
from rentals.domain.model.value_objects import DateRange


@dataclass(frozen=True)
class AvailabilityReport:
    available: bool
    requested_units: int
    total_units: int
    used_units: int
    available_units: int
    conflicting: list[Booking] = field(default_factory=list)


class AvailabilityEngine:

    def blocking_bookings(
        self,
        requested_range: DateRange,
        candidate_bookings: Iterable[Booking],
        now: datetime | None = None,
    ) -> list[Booking]:
        """Bookings from the candidates that hold units during the range."""
        now = now or utc_now()
        return [b for b in candidate_bookings if b.blocks(requested_range, now)]

    def check_availability(
        self,
        item_quantity: int,
        requested_range: DateRange,
        requested_units: int,
        candidate_bookings: Iterable[Booking],
        now: datetime | None = None,
    ) -> AvailabilityReport:
        blocking = self.blocking_bookings(requested_range, candidate_bookings, now)
        used_units = sum(b.units for b in blocking)
        # Clamped: an overbooked item (race between holds) reports 0, not < 0.
        available_units = max(0, item_quantity - used_units)

        return AvailabilityReport(
            available=available_units >= requested_units,
            requested_units=requested_units,
            total_units=item_quantity,
            used_units=used_units,
            available_units=available_units,
            conflicting=blocking,
        )
