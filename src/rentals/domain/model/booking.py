"""Booking aggregate: a claim on units of a rental item for a date range.

Status machine::

    RESERVED --confirm--> CONFIRMED --mark_returned--> RETURNED
        |                     |
        +------cancel---------+--> CANCELLED

Every transition validates its guard and returns a ``Result``.  Valid
transitions append an event to the booking's pending event log, which
the caller drains with ``pull_events()`` after persisting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from rentals.domain.clock import utc_now
from rentals.domain.model.events import (
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    BookingEvent,
    BookingReturned,
)
from rentals.domain.model.value_objects import DateRange
from rentals.domain.result import Ok, Result, state_conflict, validation_error


class BookingStatus(Enum):
    RESERVED = "RESERVED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"


class FulfillmentMethod(Enum):
    UNKNOWN = "UNKNOWN"
    SHIP = "SHIP"
    PICKUP = "PICKUP"


TERMINAL_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.RETURNED})

# ---------------------------------------------------------------------------
# Constants for cart holds
# ---------------------------------------------------------------------------
RESERVED_ORDER_PREFIX = "cart:"
DEFAULT_RESERVATION_TTL = timedelta(minutes=45)


def reserved_order_id(cart_token: str) -> str:
    """Order id placeholder carried by a not-yet-paid cart hold."""
    return f"{RESERVED_ORDER_PREFIX}{cart_token}"


def _check_units(units: object) -> Result[int]:
    if isinstance(units, bool) or not isinstance(units, int):
        return validation_error(f"Units must be an integer, got {units!r}", "InvalidUnits")
    if units < 1:
        return validation_error("Units must be at least 1", "InvalidUnits")
    return Ok(units)


@dataclass
class Booking:
    """Aggregate root for reservations.

    Use the ``reserve()`` / ``create_confirmed()`` factories for new
    bookings.  The ``__init__`` does not validate, so repositories can
    reconstitute persisted bookings as they are.

    Invariant: ``expires_at`` is None whenever status is not RESERVED.
    """

    id: str
    rental_item_id: str
    order_id: str | None
    date_range: DateRange
    units: int
    status: BookingStatus = BookingStatus.RESERVED
    fulfillment_method: FulfillmentMethod = FulfillmentMethod.UNKNOWN
    expires_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    _events: list[BookingEvent] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    # --- Factories (used for NEW bookings only) -------------------------------

    @staticmethod
    def create(
        *,
        booking_id: str,
        rental_item_id: str,
        order_id: str | None,
        date_range: DateRange,
        units: int,
        status: BookingStatus,
        fulfillment_method: FulfillmentMethod = FulfillmentMethod.UNKNOWN,
        expires_at: datetime | None = None,
        now: datetime | None = None,
    ) -> Result[Booking]:
        """Create a new booking in an initial state chosen by the caller."""
        units_result = _check_units(units)
        if not isinstance(units_result, Ok):
            return units_result
        if status in TERMINAL_STATUSES:
            return validation_error(
                f"A new booking cannot start as {status.value}", "InvalidStatus"
            )
        if expires_at is not None and status != BookingStatus.RESERVED:
            return validation_error(
                "Only RESERVED bookings can carry an expiry", "InvalidExpiry"
            )
        if not rental_item_id:
            return validation_error("Rental item ID is required")

        now = now or utc_now()
        booking = Booking(
            id=booking_id,
            rental_item_id=rental_item_id,
            order_id=order_id,
            date_range=date_range,
            units=units,
            status=status,
            fulfillment_method=fulfillment_method,
            expires_at=expires_at,
            created_at=now,
            updated_at=now,
        )
        booking._record(
            BookingCreated(
                booking_id=booking.id,
                occurred_at=now,
                rental_item_id=rental_item_id,
                start_date=date_range.start_date,
                end_date=date_range.end_date,
                units=units,
                status=status.value,
            )
        )
        return Ok(booking)

    @staticmethod
    def reserve(
        *,
        booking_id: str,
        rental_item_id: str,
        cart_token: str,
        date_range: DateRange,
        units: int,
        fulfillment_method: FulfillmentMethod = FulfillmentMethod.UNKNOWN,
        ttl: timedelta = DEFAULT_RESERVATION_TTL,
        now: datetime | None = None,
    ) -> Result[Booking]:
        """Place a temporary cart hold that expires after ``ttl``."""
        if not cart_token or not cart_token.strip():
            return validation_error("Cart token is required to reserve")
        if ttl <= timedelta(0):
            return validation_error("Reservation TTL must be positive")

        now = now or utc_now()
        return Booking.create(
            booking_id=booking_id,
            rental_item_id=rental_item_id,
            order_id=reserved_order_id(cart_token.strip()),
            date_range=date_range,
            units=units,
            status=BookingStatus.RESERVED,
            fulfillment_method=fulfillment_method,
            expires_at=now + ttl,
            now=now,
        )

    @staticmethod
    def create_confirmed(
        *,
        booking_id: str,
        rental_item_id: str,
        order_id: str,
        date_range: DateRange,
        units: int,
        fulfillment_method: FulfillmentMethod = FulfillmentMethod.UNKNOWN,
        now: datetime | None = None,
    ) -> Result[Booking]:
        """Create a booking for an order that is already paid."""
        if not order_id or not order_id.strip():
            return validation_error("Order ID is required for a confirmed booking")
        return Booking.create(
            booking_id=booking_id,
            rental_item_id=rental_item_id,
            order_id=order_id.strip(),
            date_range=date_range,
            units=units,
            status=BookingStatus.CONFIRMED,
            fulfillment_method=fulfillment_method,
            now=now,
        )

    # --- State transitions ----------------------------------------------------

    def confirm(self, order_id: str, now: datetime | None = None) -> Result[BookingEvent]:
        """Transition RESERVED -> CONFIRMED, tying the booking to a paid order."""
        if self.status != BookingStatus.RESERVED:
            return state_conflict(
                f"Cannot confirm booking {self.id}: current status is "
                f"{self.status.value}, expected RESERVED",
                "IllegalTransition",
            )
        if not order_id or not order_id.strip():
            return validation_error("Order ID is required to confirm booking")

        now = now or utc_now()
        self.status = BookingStatus.CONFIRMED
        self.order_id = order_id.strip()
        self.expires_at = None
        self.updated_at = now
        return Ok(self._record(BookingConfirmed(self.id, now, self.order_id)))

    def cancel(self, reason: str | None = None, now: datetime | None = None) -> Result[BookingEvent]:
        """Transition RESERVED|CONFIRMED -> CANCELLED."""
        if self.status == BookingStatus.CANCELLED:
            return state_conflict(
                f"Booking {self.id} is already cancelled", "IllegalTransition"
            )
        if self.status == BookingStatus.RETURNED:
            return state_conflict(
                f"Cannot cancel booking {self.id}: it has been returned",
                "IllegalTransition",
            )

        now = now or utc_now()
        self.status = BookingStatus.CANCELLED
        self.expires_at = None
        self.updated_at = now
        return Ok(self._record(BookingCancelled(self.id, now, reason)))

    def mark_returned(self, now: datetime | None = None) -> Result[BookingEvent]:
        """Transition CONFIRMED -> RETURNED."""
        if self.status != BookingStatus.CONFIRMED:
            return state_conflict(
                f"Cannot mark booking {self.id} as returned: current status is "
                f"{self.status.value}, expected CONFIRMED",
                "IllegalTransition",
            )

        now = now or utc_now()
        self.status = BookingStatus.RETURNED
        self.updated_at = now
        return Ok(self._record(BookingReturned(self.id, now)))

    # --- Amendments (no status change) ----------------------------------------

    def amend(
        self,
        units: int | None = None,
        fulfillment_method: FulfillmentMethod | None = None,
        now: datetime | None = None,
    ) -> Result[None]:
        """Adjust units and/or fulfillment method, e.g. to match the paid order."""
        if units is not None:
            units_result = _check_units(units)
            if not isinstance(units_result, Ok):
                return units_result

        changed = False
        if units is not None and units != self.units:
            self.units = units
            changed = True
        if fulfillment_method is not None and fulfillment_method != self.fulfillment_method:
            self.fulfillment_method = fulfillment_method
            changed = True
        if changed:
            self.updated_at = now or utc_now()
        return Ok(None)

    def extend_hold(
        self,
        units: int,
        ttl: timedelta = DEFAULT_RESERVATION_TTL,
        now: datetime | None = None,
    ) -> Result[None]:
        """Refresh a cart hold's units and push its expiry out by ``ttl``."""
        if self.status != BookingStatus.RESERVED:
            return state_conflict(
                f"Cannot extend booking {self.id}: current status is "
                f"{self.status.value}, expected RESERVED",
                "IllegalTransition",
            )
        units_result = _check_units(units)
        if not isinstance(units_result, Ok):
            return units_result

        now = now or utc_now()
        self.units = units
        self.expires_at = now + ttl
        self.updated_at = now
        return Ok(None)

    # --- Queries --------------------------------------------------------------

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or utc_now()) > self.expires_at

    def is_active(self, now: datetime | None = None) -> bool:
        """True if the booking currently holds inventory."""
        if self.status == BookingStatus.CONFIRMED:
            return True
        return self.status == BookingStatus.RESERVED and not self.is_expired(now)

    def blocks(self, date_range: DateRange, now: datetime | None = None) -> bool:
        return self.is_active(now) and self.date_range.overlaps_with(date_range)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_cart_hold(self) -> bool:
        return bool(self.order_id) and self.order_id.startswith(RESERVED_ORDER_PREFIX)

    @property
    def duration_days(self) -> int:
        return self.date_range.duration_days

    # --- Events ---------------------------------------------------------------

    def pull_events(self) -> list[BookingEvent]:
        """Return and clear the events recorded since the last pull."""
        events, self._events = self._events, []
        return events

    # --- Internal helpers -----------------------------------------------------

    def _record(self, event: BookingEvent) -> BookingEvent:
        self._events.append(event)
        return event
