"""Application service: Record Paid Order use case.

Driven by the platform's "order paid" webhook, which is delivered at
least once and possibly out of order with respect to the cart hold.
Each rental line of the order ends up as exactly one CONFIRMED booking,
however many times the webhook is replayed.

Lines for the same (product, start, end) are merged first.  Then, per
line, the first step that applies wins:

1. Idempotency guard: a booking already carries this order id for the
   same item and dates, or the referenced booking is already confirmed
   for this order, so the line was recorded by an earlier delivery.
2. Confirm by reference: the line carries the booking id of its hold.
3. Promote the cart hold: the ``cart:<token>`` hold for the same dates.
4. Promote by date match: any RESERVED hold for the same dates.
5. Create a CONFIRMED booking directly.

All lines are validated before any of them is processed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from rentals.application.confirm_booking import ConfirmBookingHandler
from rentals.application.create_confirmed_booking import CreateConfirmedBookingHandler
from rentals.application.dto import PaidLineDTO, PaidOrderDTO, PaidRentalLine
from rentals.application.promote_booking import PromoteBookingByDatesHandler
from rentals.domain.clock import Clock, utc_now
from rentals.domain.model.booking import BookingStatus, FulfillmentMethod
from rentals.domain.model.rental_item import RentalItem
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import Err, Ok, Result, validation_error

logger = logging.getLogger(__name__)


class PaidLineOutcome(Enum):
    ALREADY_RECORDED = "ALREADY_RECORDED"
    CONFIRMED_BY_REFERENCE = "CONFIRMED_BY_REFERENCE"
    PROMOTED_CART_HOLD = "PROMOTED_CART_HOLD"
    PROMOTED_BY_DATES = "PROMOTED_BY_DATES"
    CREATED = "CREATED"
    NOT_TRACKED = "NOT_TRACKED"


@dataclass
class _MergedLine:
    external_product_id: str
    date_range: DateRange
    units: int
    booking_ref: str | None
    cart_token: str | None


class RecordPaidOrderHandler:

    def __init__(
        self,
        booking_repo: BookingRepository,
        item_repo: RentalItemRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._booking_repo = booking_repo
        self._item_repo = item_repo
        self._confirm = ConfirmBookingHandler(booking_repo, clock)
        self._promote = PromoteBookingByDatesHandler(booking_repo, clock)
        self._create = CreateConfirmedBookingHandler(booking_repo, item_repo, clock)

    async def handle(
        self,
        shop: str,
        order_id: str,
        lines: list[PaidRentalLine],
        fulfillment_method: FulfillmentMethod = FulfillmentMethod.UNKNOWN,
        cart_token: str | None = None,
    ) -> Result[PaidOrderDTO]:
        """Record every rental line of a paid order.

        ``cart_token`` is the order-level token, used for lines that do not
        carry their own.
        """
        if not order_id or not order_id.strip():
            return validation_error("Order ID is required")
        order_id = order_id.strip()

        merged = self._merge_lines(lines, cart_token)
        if isinstance(merged, Err):
            return merged

        results: list[PaidLineDTO] = []
        for line in merged.value:
            item = await self._item_repo.get_by_external_product(
                shop, line.external_product_id
            )
            if item is None:
                logger.warning(
                    "Order %s: product %s is not tracked for rental in %s, skipping",
                    order_id,
                    line.external_product_id,
                    shop,
                )
                results.append(self._line_dto(line, PaidLineOutcome.NOT_TRACKED, None))
                continue

            recorded = await self._record_line(item, order_id, line, fulfillment_method)
            if isinstance(recorded, Err):
                return recorded
            outcome, booking_id = recorded.value
            logger.info(
                "Order %s line %s %s: %s (booking=%s)",
                order_id,
                line.external_product_id,
                line.date_range,
                outcome.value,
                booking_id,
            )
            results.append(self._line_dto(line, outcome, booking_id))

        return Ok(PaidOrderDTO(order_id=order_id, lines=results))

    # --- Per-line fallback chain -----------------------------------------------

    async def _record_line(
        self,
        item: RentalItem,
        order_id: str,
        line: _MergedLine,
        fulfillment_method: FulfillmentMethod,
    ) -> Result[tuple[PaidLineOutcome, str]]:
        start, end = line.date_range.start_date, line.date_range.end_date

        for booking in await self._booking_repo.find_by_order_id(order_id):
            if booking.rental_item_id == item.id and booking.date_range == line.date_range:
                return Ok((PaidLineOutcome.ALREADY_RECORDED, booking.id))

        if line.booking_ref:
            held = await self._booking_repo.get_by_id(line.booking_ref)
            if (
                held is not None
                and held.rental_item_id == item.id
                and held.status == BookingStatus.CONFIRMED
                and held.order_id == order_id
            ):
                # Confirmed by an earlier delivery, possibly with the hold's own dates.
                return Ok((PaidLineOutcome.ALREADY_RECORDED, held.id))
            if (
                held is not None
                and held.rental_item_id == item.id
                and held.status == BookingStatus.RESERVED
            ):
                confirmed = await self._confirm.handle(
                    held.id, order_id, line.units, fulfillment_method
                )
                if isinstance(confirmed, Ok):
                    return Ok((PaidLineOutcome.CONFIRMED_BY_REFERENCE, confirmed.value.id))
                logger.warning(
                    "Order %s: booking reference %s could not be confirmed: %s",
                    order_id,
                    line.booking_ref,
                    confirmed.message,
                )
            else:
                logger.info(
                    "Order %s: booking reference %s is not a usable hold, falling back",
                    order_id,
                    line.booking_ref,
                )

        if line.cart_token:
            promoted = await self._promote.handle(
                item.id, start, end, order_id, line.units, fulfillment_method,
                cart_token=line.cart_token,
            )
            if isinstance(promoted, Err):
                return promoted
            if promoted.value is not None:
                return Ok((PaidLineOutcome.PROMOTED_CART_HOLD, promoted.value.id))

        promoted = await self._promote.handle(
            item.id, start, end, order_id, line.units, fulfillment_method
        )
        if isinstance(promoted, Err):
            return promoted
        if promoted.value is not None:
            return Ok((PaidLineOutcome.PROMOTED_BY_DATES, promoted.value.id))

        created = await self._create.handle(
            item.id, order_id, start, end, line.units, fulfillment_method
        )
        if isinstance(created, Err):
            return created
        return Ok((PaidLineOutcome.CREATED, created.value.id))

    # --- Internal helpers -------------------------------------------------------

    @staticmethod
    def _merge_lines(
        lines: list[PaidRentalLine], cart_token: str | None
    ) -> Result[list[_MergedLine]]:
        merged: dict[tuple[str, DateRange], _MergedLine] = {}
        for raw in lines:
            if not raw.external_product_id:
                return validation_error("Every rental line needs a product ID")
            if isinstance(raw.units, bool) or not isinstance(raw.units, int) or raw.units < 1:
                return validation_error(
                    f"Invalid units {raw.units!r} for product {raw.external_product_id}",
                    "InvalidUnits",
                )
            date_range = DateRange.create(raw.start_date, raw.end_date)
            if isinstance(date_range, Err):
                return validation_error(
                    f"Product {raw.external_product_id}: {date_range.message}",
                    date_range.error.code,
                )

            key = (raw.external_product_id, date_range.value)
            existing = merged.get(key)
            if existing is None:
                merged[key] = _MergedLine(
                    external_product_id=raw.external_product_id,
                    date_range=date_range.value,
                    units=raw.units,
                    booking_ref=raw.booking_ref,
                    cart_token=raw.cart_token or cart_token,
                )
            else:
                existing.units += raw.units
                existing.booking_ref = existing.booking_ref or raw.booking_ref
                existing.cart_token = existing.cart_token or raw.cart_token
        return Ok(list(merged.values()))

    @staticmethod
    def _line_dto(
        line: _MergedLine, outcome: PaidLineOutcome, booking_id: str | None
    ) -> PaidLineDTO:
        return PaidLineDTO(
            external_product_id=line.external_product_id,
            start_date=line.date_range.start_date.isoformat(),
            end_date=line.date_range.end_date.isoformat(),
            units=line.units,
            outcome=outcome.value,
            booking_id=booking_id,
        )
