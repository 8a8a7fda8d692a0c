"""Unit tests for the PricingCalculator domain service."""

import pytest

from rentals.domain.errors import ErrorKind
from rentals.domain.model.rate_tier import (
    PricingAlgorithm,
    RateTierSpec,
    build_rate_tiers,
)
from rentals.domain.model.value_objects import Money
from rentals.domain.result import Err
from rentals.domain.service.pricing_calculator import PricingCalculator, select_tier

BASE = Money(1000)
TIERS = build_rate_tiers(
    [RateTierSpec(14, 500), RateTierSpec(3, 800), RateTierSpec(7, 600)], "USD"
).value


class TestFlatPricing:

    def test_flat_ignores_tiers(self):
        quote = PricingCalculator().calculate(BASE, PricingAlgorithm.FLAT, TIERS, 10).value
        assert quote.price_per_day == BASE
        assert quote.total_cents == 10000
        assert quote.applied_tier is None

    def test_single_day(self):
        quote = PricingCalculator().calculate(BASE, PricingAlgorithm.FLAT, [], 1).value
        assert quote.total_cents == 1000


class TestTieredPricing:

    def test_ten_days_uses_seven_day_tier(self):
        quote = PricingCalculator().calculate(BASE, PricingAlgorithm.TIERED, TIERS, 10).value
        assert quote.price_per_day.cents == 600
        assert quote.applied_tier.min_days == 7
        assert quote.total_cents == 6000

    def test_below_first_tier_uses_base_price(self):
        quote = PricingCalculator().calculate(BASE, PricingAlgorithm.TIERED, TIERS, 2).value
        assert quote.price_per_day == BASE
        assert quote.applied_tier is None

    @pytest.mark.parametrize(
        "days, expected_min_days",
        [(3, 3), (6, 3), (7, 7), (13, 7), (14, 14), (30, 14)],
    )
    def test_tier_boundaries(self, days, expected_min_days):
        quote = PricingCalculator().calculate(BASE, PricingAlgorithm.TIERED, TIERS, days).value
        assert quote.applied_tier.min_days == expected_min_days

    def test_price_per_day_never_rises_with_duration(self):
        calc = PricingCalculator()
        prices = [
            calc.calculate(BASE, PricingAlgorithm.TIERED, TIERS, d).value.price_per_day.cents
            for d in range(1, 21)
        ]
        assert prices == sorted(prices, reverse=True)

    def test_select_tier_ignores_input_order(self):
        assert select_tier(list(reversed(TIERS)), 8).min_days == 7


class TestPricingValidation:

    @pytest.mark.parametrize("days", [0, -3, 2.5])
    def test_invalid_duration_rejected(self, days):
        result = PricingCalculator().calculate(BASE, PricingAlgorithm.FLAT, [], days)
        assert isinstance(result, Err)
        assert result.kind == ErrorKind.VALIDATION


class TestBuildRateTiers:

    def test_sorted_ascending(self):
        assert [t.min_days for t in TIERS] == [3, 7, 14]

    def test_duplicate_thresholds_rejected(self):
        result = build_rate_tiers([RateTierSpec(3, 800), RateTierSpec(3, 700)], "USD")
        assert "Duplicate" in result.message

    def test_zero_min_days_rejected(self):
        assert isinstance(build_rate_tiers([RateTierSpec(0, 800)], "USD"), Err)

    def test_fractional_cents_rejected(self):
        result = build_rate_tiers([RateTierSpec(3, 799.5)], "USD")
        assert result.error.code == "NotWholeCents"
