"""RentalItem aggregate: a product configured for rental.

Owns the pricing configuration and the total number of units that can be
out on rent at the same time.  Booking lifecycle events never change the
quantity; only availability computation reads it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from rentals.domain.clock import utc_now
from rentals.domain.model.rate_tier import (
    PricingAlgorithm,
    RateTier,
    RateTierSpec,
    build_rate_tiers,
)
from rentals.domain.model.value_objects import Money
from rentals.domain.result import Ok, Result, validation_error
from rentals.domain.service.pricing_calculator import PriceQuote, PricingCalculator


def _check_quantity(quantity: object) -> Result[int]:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return validation_error(f"Quantity must be an integer, got {quantity!r}")
    if quantity < 0:
        return validation_error("Quantity cannot be negative", "Negative")
    return Ok(quantity)


@dataclass
class RentalItem:
    """Aggregate root for rental configuration.

    Created once per (shop, external product) pair through ``create()``.
    Update methods validate everything before mutating, so a failed update
    leaves the item untouched.
    """

    id: str
    shop: str
    external_product_id: str
    currency_code: str
    base_price_per_day: Money
    pricing_algorithm: PricingAlgorithm = PricingAlgorithm.FLAT
    quantity: int = 1
    rate_tiers: list[RateTier] = field(default_factory=list)
    name: str | None = None
    image_url: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    # --- Factory (used for NEW items only) ------------------------------------

    @staticmethod
    def create(
        *,
        item_id: str,
        shop: str,
        external_product_id: str,
        currency_code: str,
        base_price_per_day_cents: int,
        pricing_algorithm: PricingAlgorithm = PricingAlgorithm.FLAT,
        quantity: int = 1,
        rate_tiers: list[RateTierSpec] | None = None,
        name: str | None = None,
        image_url: str | None = None,
        now: datetime | None = None,
    ) -> Result[RentalItem]:
        if not shop or not shop.strip():
            return validation_error("Shop is required")
        if not external_product_id or not external_product_id.strip():
            return validation_error("External product ID is required")
        if not currency_code or not currency_code.strip():
            return validation_error("Currency code is required")

        currency = currency_code.strip().upper()
        base_price = Money.from_cents(base_price_per_day_cents, currency)
        if not isinstance(base_price, Ok):
            return base_price
        qty = _check_quantity(quantity)
        if not isinstance(qty, Ok):
            return qty
        tiers = build_rate_tiers(list(rate_tiers or []), currency)
        if not isinstance(tiers, Ok):
            return tiers

        now = now or utc_now()
        return Ok(
            RentalItem(
                id=item_id,
                shop=shop.strip(),
                external_product_id=external_product_id.strip(),
                currency_code=currency,
                base_price_per_day=base_price.value,
                pricing_algorithm=pricing_algorithm,
                quantity=qty.value,
                rate_tiers=tiers.value,
                name=name,
                image_url=image_url,
                created_at=now,
                updated_at=now,
            )
        )

    # --- Updates --------------------------------------------------------------

    def update_pricing(
        self,
        base_price_per_day_cents: int,
        algorithm: PricingAlgorithm,
        rate_tiers: list[RateTierSpec] | None,
        now: datetime | None = None,
    ) -> Result[None]:
        """Replace the pricing configuration.  ``None`` tiers clears them."""
        base_price = Money.from_cents(base_price_per_day_cents, self.currency_code)
        if not isinstance(base_price, Ok):
            return base_price
        tiers = build_rate_tiers(list(rate_tiers or []), self.currency_code)
        if not isinstance(tiers, Ok):
            return tiers

        self.base_price_per_day = base_price.value
        self.pricing_algorithm = algorithm
        self.rate_tiers = tiers.value
        self.updated_at = now or utc_now()
        return Ok(None)

    def update_quantity(self, quantity: int, now: datetime | None = None) -> Result[None]:
        qty = _check_quantity(quantity)
        if not isinstance(qty, Ok):
            return qty
        self.quantity = qty.value
        self.updated_at = now or utc_now()
        return Ok(None)

    def update_basics(
        self,
        *,
        name: str | None = None,
        image_url: str | None = None,
        currency_code: str | None = None,
        base_price_per_day_cents: int | None = None,
        now: datetime | None = None,
    ) -> Result[None]:
        """Sync display metadata and base price from the commerce platform.

        Changing the currency re-tags the base price and every tier; the
        cent amounts are kept as they are.
        """
        currency = self.currency_code
        if currency_code is not None:
            if not currency_code.strip():
                return validation_error("Currency code cannot be blank")
            currency = currency_code.strip().upper()

        base_cents = (
            self.base_price_per_day.cents
            if base_price_per_day_cents is None
            else base_price_per_day_cents
        )
        base_price = Money.from_cents(base_cents, currency)
        if not isinstance(base_price, Ok):
            return base_price

        if name is not None:
            self.name = name
        if image_url is not None:
            self.image_url = image_url
        if currency != self.currency_code:
            self.rate_tiers = [
                RateTier(t.min_days, Money(t.price_per_day.cents, currency))
                for t in self.rate_tiers
            ]
        self.currency_code = currency
        self.base_price_per_day = base_price.value
        self.updated_at = now or utc_now()
        return Ok(None)

    # --- Pricing --------------------------------------------------------------

    def quote(self, duration_days: int) -> Result[PriceQuote]:
        """Single-unit price for renting this item for ``duration_days``."""
        return PricingCalculator().calculate(
            self.base_price_per_day,
            self.pricing_algorithm,
            self.rate_tiers,
            duration_days,
        )

    @property
    def display_name(self) -> str:
        return self.name or f"Product {self.external_product_id}"
