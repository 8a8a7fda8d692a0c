"""Application service: Release Reservation use case.

The customer removed a rental line from the cart before checkout.  The
hold is deleted outright rather than cancelled: it never became an
order, so there is nothing to keep for the merchant.
"""

from __future__ import annotations

import logging

from rentals.domain.model.booking import BookingStatus, reserved_order_id
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.result import Ok, Result, not_found, state_conflict

logger = logging.getLogger(__name__)


class ReleaseReservationHandler:

    def __init__(self, booking_repo: BookingRepository) -> None:
        self._booking_repo = booking_repo

    async def handle(self, booking_id: str, cart_token: str | None = None) -> Result[str]:
        """Delete a RESERVED hold.  Returns the released booking's id.

        With ``cart_token`` the hold must belong to that cart; a hold of
        another cart is reported as not found.
        """
        booking = await self._booking_repo.get_by_id(booking_id)
        if booking is None:
            return not_found(f"Booking {booking_id} not found")
        if cart_token and booking.order_id != reserved_order_id(cart_token.strip()):
            return not_found(f"Booking {booking_id} not found for this cart")
        if booking.status != BookingStatus.RESERVED:
            return state_conflict(
                f"Cannot release booking {booking_id}: status is "
                f"{booking.status.value}, expected RESERVED",
                "IllegalTransition",
            )

        await self._booking_repo.delete(booking.id)
        logger.info("Released hold %s (%s)", booking.id, booking.order_id)
        return Ok(booking.id)
