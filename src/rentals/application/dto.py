"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI/webhook adapters and the application
layer without exposing domain internals.  Dates are ISO strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rentals.domain.model.booking import Booking
from rentals.domain.model.rental_item import RentalItem
from rentals.domain.service.availability_engine import AvailabilityReport


@dataclass(frozen=True)
class BookingDTO:
    id: str
    rental_item_id: str
    order_id: str | None
    start_date: str
    end_date: str
    units: int
    status: str
    fulfillment_method: str
    expires_at: str | None
    duration_days: int


@dataclass(frozen=True)
class ConflictDTO:
    id: str
    start_date: str
    end_date: str
    units: int
    status: str


@dataclass(frozen=True)
class AvailabilityDTO:
    rental_item_id: str
    available: bool
    requested_units: int
    total_units: int
    used_units: int
    available_units: int
    conflicting: list[ConflictDTO]


@dataclass(frozen=True)
class QuoteDTO:
    rental_item_id: str
    duration_days: int
    units: int
    price_per_day_cents: int
    unit_total_cents: int
    line_total_cents: int
    currency_code: str
    algorithm: str
    applied_tier_min_days: int | None


@dataclass(frozen=True)
class RateTierDTO:
    min_days: int
    price_per_day_cents: int


@dataclass(frozen=True)
class RentalItemDTO:
    id: str
    shop: str
    external_product_id: str
    name: str | None
    image_url: str | None
    currency_code: str
    base_price_per_day_cents: int
    pricing_algorithm: str
    quantity: int
    rate_tiers: list[RateTierDTO]


@dataclass(frozen=True)
class CancellationDTO:
    cancelled_count: int
    booking_ids: list[str]


@dataclass(frozen=True)
class CleanupDTO:
    deleted_count: int
    booking_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DeletedItemDTO:
    external_product_id: str
    cancelled_reservations: int


@dataclass(frozen=True)
class CalendarBookingDTO:
    id: str
    start_date: str
    end_date: str
    units: int
    rental_item_name: str
    status: str
    fulfillment_method: str
    order_id: str | None


@dataclass(frozen=True)
class CalendarDTO:
    rental_item_id: str
    year: int
    month: int
    bookings: list[CalendarBookingDTO]


@dataclass(frozen=True)
class PaidRentalLine:
    """Input: one rental line of a paid order, as read from the order payload."""

    external_product_id: str
    start_date: str
    end_date: str
    units: int
    booking_ref: str | None = None
    cart_token: str | None = None


@dataclass(frozen=True)
class PaidLineDTO:
    external_product_id: str
    start_date: str
    end_date: str
    units: int
    outcome: str
    booking_id: str | None


@dataclass(frozen=True)
class PaidOrderDTO:
    order_id: str
    lines: list[PaidLineDTO]


# --- Mapping ------------------------------------------------------------------


def booking_to_dto(booking: Booking) -> BookingDTO:
    return BookingDTO(
        id=booking.id,
        rental_item_id=booking.rental_item_id,
        order_id=booking.order_id,
        start_date=booking.date_range.start_date.isoformat(),
        end_date=booking.date_range.end_date.isoformat(),
        units=booking.units,
        status=booking.status.value,
        fulfillment_method=booking.fulfillment_method.value,
        expires_at=booking.expires_at.isoformat() if booking.expires_at else None,
        duration_days=booking.duration_days,
    )


def availability_to_dto(rental_item_id: str, report: AvailabilityReport) -> AvailabilityDTO:
    return AvailabilityDTO(
        rental_item_id=rental_item_id,
        available=report.available,
        requested_units=report.requested_units,
        total_units=report.total_units,
        used_units=report.used_units,
        available_units=report.available_units,
        conflicting=[
            ConflictDTO(
                id=b.id,
                start_date=b.date_range.start_date.isoformat(),
                end_date=b.date_range.end_date.isoformat(),
                units=b.units,
                status=b.status.value,
            )
            for b in report.conflicting
        ],
    )


def rental_item_to_dto(item: RentalItem) -> RentalItemDTO:
    return RentalItemDTO(
        id=item.id,
        shop=item.shop,
        external_product_id=item.external_product_id,
        name=item.name,
        image_url=item.image_url,
        currency_code=item.currency_code,
        base_price_per_day_cents=item.base_price_per_day.cents,
        pricing_algorithm=item.pricing_algorithm.value,
        quantity=item.quantity,
        rate_tiers=[
            RateTierDTO(min_days=t.min_days, price_per_day_cents=t.price_per_day.cents)
            for t in item.rate_tiers
        ],
    )
