"""Application service: Update Rental Item use case.

Only the fields that are passed are changed.  Every field is validated
before the item is touched, so a rejected update leaves it as it was.
"""

from __future__ import annotations

from rentals.application.dto import RentalItemDTO, rental_item_to_dto
from rentals.domain.clock import Clock, utc_now
from rentals.domain.model.rate_tier import PricingAlgorithm, RateTierSpec
from rentals.domain.model.rental_item import RentalItem
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import Ok, Result, not_found, validation_error


class UpdateRentalItemHandler:

    def __init__(self, item_repo: RentalItemRepository, clock: Clock = utc_now) -> None:
        self._item_repo = item_repo
        self._clock = clock

    async def handle(
        self,
        item_id: str,
        base_price_per_day_cents: int | None = None,
        pricing_algorithm: PricingAlgorithm | None = None,
        rate_tiers: list[RateTierSpec] | None = None,
        quantity: int | None = None,
        name: str | None = None,
    ) -> Result[RentalItemDTO]:
        item = await self._item_repo.get_by_id(item_id)
        if item is None:
            return not_found(f"Rental item '{item_id}' not found")

        if quantity is not None and (
            isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0
        ):
            return validation_error(
                f"Quantity must be a non-negative integer, got {quantity!r}"
            )

        now = self._clock()
        if (
            base_price_per_day_cents is not None
            or pricing_algorithm is not None
            or rate_tiers is not None
        ):
            priced = item.update_pricing(
                item.base_price_per_day.cents
                if base_price_per_day_cents is None
                else base_price_per_day_cents,
                pricing_algorithm or item.pricing_algorithm,
                rate_tiers if rate_tiers is not None else self._current_tiers(item),
                now,
            )
            if not isinstance(priced, Ok):
                return priced

        if quantity is not None:
            item.update_quantity(quantity, now)
        if name is not None:
            item.update_basics(name=name, now=now)

        await self._item_repo.save(item)
        return Ok(rental_item_to_dto(item))

    @staticmethod
    def _current_tiers(item: RentalItem) -> list[RateTierSpec]:
        return [RateTierSpec(t.min_days, t.price_per_day.cents) for t in item.rate_tiers]
