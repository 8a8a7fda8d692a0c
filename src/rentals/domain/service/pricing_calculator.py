"""Domain service: Pricing Calculator.

Turns a rental item's pricing configuration and a duration into a
per-day price and a single-unit total.  Scaling by the number of units
is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from rentals.domain.model.rate_tier import PricingAlgorithm, RateTier
from rentals.domain.model.value_objects import Money
from rentals.domain.result import Ok, Result, validation_error


@dataclass(frozen=True)
class PriceQuote:
    duration_days: int
    price_per_day: Money
    total: Money
    applied_tier: RateTier | None = None

    @property
    def total_cents(self) -> int:
        return self.total.cents


def select_tier(tiers: Iterable[RateTier], duration_days: int) -> RateTier | None:
    """Return the tier with the highest ``min_days`` not above the duration."""
    best: RateTier | None = None
    for tier in tiers:
        if tier.min_days <= duration_days and (best is None or tier.min_days > best.min_days):
            best = tier
    return best


class PricingCalculator:

    def calculate(
        self,
        base_price_per_day: Money,
        algorithm: PricingAlgorithm,
        tiers: Iterable[RateTier],
        duration_days: int,
    ) -> Result[PriceQuote]:
        if isinstance(duration_days, bool) or not isinstance(duration_days, int):
            return validation_error(
                f"Duration must be a whole number of days, got {duration_days!r}"
            )
        if duration_days < 1:
            return validation_error("Duration must be at least 1 day")

        applied: RateTier | None = None
        price_per_day = base_price_per_day
        if algorithm == PricingAlgorithm.TIERED:
            applied = select_tier(tiers, duration_days)
            if applied is not None:
                price_per_day = applied.price_per_day

        total = price_per_day.multiply(duration_days)
        if not isinstance(total, Ok):
            return total

        return Ok(
            PriceQuote(
                duration_days=duration_days,
                price_per_day=price_per_day,
                total=total.value,
                applied_tier=applied,
            )
        )
