"""Duration-based price tiers.

Tiers are cumulative thresholds, not ranges: a tier with ``min_days=7``
applies to every rental of seven days or more unless a tier with a higher
threshold also applies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rentals.domain.model.value_objects import Money
from rentals.domain.result import Ok, Result, validation_error


class PricingAlgorithm(Enum):
    FLAT = "FLAT"
    TIERED = "TIERED"


@dataclass(frozen=True)
class RateTier:
    min_days: int
    price_per_day: Money


@dataclass(frozen=True)
class RateTierSpec:
    """Input: a tier as entered by the merchant, in raw cents."""

    min_days: int
    price_per_day_cents: int


def build_rate_tiers(specs: list[RateTierSpec], currency: str) -> Result[list[RateTier]]:
    """Validate tier specs and return them as tiers sorted by ``min_days``."""
    tiers: list[RateTier] = []
    seen: set[int] = set()

    for entry in specs:
        if isinstance(entry.min_days, bool) or not isinstance(entry.min_days, int):
            return validation_error(
                f"Rate tier minimum days must be an integer, got {entry.min_days!r}"
            )
        if entry.min_days < 1:
            return validation_error(
                f"Rate tier minimum days must be at least 1, got {entry.min_days}"
            )
        if entry.min_days in seen:
            return validation_error(
                f"Duplicate rate tier for {entry.min_days} days"
            )
        seen.add(entry.min_days)

        price = Money.from_cents(entry.price_per_day_cents, currency)
        if not isinstance(price, Ok):
            return validation_error(
                f"Invalid rate tier price: {price.message}", price.error.code
            )
        tiers.append(RateTier(min_days=entry.min_days, price_per_day=price.value))

    tiers.sort(key=lambda tier: tier.min_days)
    return Ok(tiers)
