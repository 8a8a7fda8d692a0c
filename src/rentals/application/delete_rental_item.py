"""Application service: Delete Rental Item use case.

Triggered when the product is deleted on the platform.  Open cart holds
are cancelled first, then the configuration is removed.  Confirmed and
historical bookings stay in storage with their own item id and dates.
"""

from __future__ import annotations

import logging

from rentals.application.cancel_bookings import (
    PRODUCT_DELETED_REASON,
    CancelReservedBookingsByRentalItemHandler,
)
from rentals.application.dto import DeletedItemDTO
from rentals.domain.clock import Clock, utc_now
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import Err, Ok, Result, not_found

logger = logging.getLogger(__name__)


class DeleteRentalItemHandler:

    def __init__(
        self,
        item_repo: RentalItemRepository,
        booking_repo: BookingRepository,
        clock: Clock = utc_now,
    ) -> None:
        self._item_repo = item_repo
        self._cancel_reserved = CancelReservedBookingsByRentalItemHandler(booking_repo, clock)

    async def handle(self, shop: str, external_product_id: str) -> Result[DeletedItemDTO]:
        item = await self._item_repo.get_by_external_product(shop, external_product_id)
        if item is None:
            return not_found(
                f"Product {external_product_id} is not rentable in {shop}"
            )

        cancelled = await self._cancel_reserved.handle(item.id, PRODUCT_DELETED_REASON)
        if isinstance(cancelled, Err):
            return cancelled

        await self._item_repo.delete(item.id)
        logger.info(
            "Deleted rental item %s (%s/%s)", item.id, shop, external_product_id
        )
        return Ok(
            DeletedItemDTO(
                external_product_id=item.external_product_id,
                cancelled_reservations=cancelled.value.cancelled_count,
            )
        )
