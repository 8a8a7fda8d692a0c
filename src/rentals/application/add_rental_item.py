"""Application service: Add Rental Item use case."""

from __future__ import annotations

import logging

from rentals.application.dto import RentalItemDTO, rental_item_to_dto
from rentals.domain.clock import Clock, utc_now
from rentals.domain.identity import new_id
from rentals.domain.model.rate_tier import PricingAlgorithm, RateTierSpec
from rentals.domain.model.rental_item import RentalItem
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import Ok, Result, validation_error

logger = logging.getLogger(__name__)


class AddRentalItemHandler:

    def __init__(self, item_repo: RentalItemRepository, clock: Clock = utc_now) -> None:
        self._item_repo = item_repo
        self._clock = clock

    async def handle(
        self,
        shop: str,
        external_product_id: str,
        base_price_per_day_cents: int,
        currency_code: str = "USD",
        pricing_algorithm: PricingAlgorithm = PricingAlgorithm.FLAT,
        quantity: int = 1,
        rate_tiers: list[RateTierSpec] | None = None,
        name: str | None = None,
        image_url: str | None = None,
    ) -> Result[RentalItemDTO]:
        """Make a shop's product rentable.  One configuration per product."""
        item = RentalItem.create(
            item_id=new_id(),
            shop=shop,
            external_product_id=external_product_id,
            currency_code=currency_code,
            base_price_per_day_cents=base_price_per_day_cents,
            pricing_algorithm=pricing_algorithm,
            quantity=quantity,
            rate_tiers=rate_tiers,
            name=name,
            image_url=image_url,
            now=self._clock(),
        )
        if not isinstance(item, Ok):
            return item

        existing = await self._item_repo.get_by_external_product(
            item.value.shop, item.value.external_product_id
        )
        if existing is not None:
            return validation_error(
                f"Product {item.value.external_product_id} is already rentable "
                f"in {item.value.shop}",
                "DuplicateItem",
            )

        await self._item_repo.save(item.value)
        logger.info(
            "Added rental item %s for %s/%s",
            item.value.id,
            item.value.shop,
            item.value.external_product_id,
        )
        return Ok(rental_item_to_dto(item.value))
