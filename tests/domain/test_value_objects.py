"""Unit tests for domain value objects."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from rentals.domain.errors import ErrorKind
from rentals.domain.model.value_objects import DateRange, Money, count_rental_days
from rentals.domain.result import Err, Ok


# ── DateRange ────────────────────────────────────────────────────────────────


class TestDateRange:

    def test_create_from_iso_strings(self):
        result = DateRange.create("2026-03-01", "2026-03-05")
        assert isinstance(result, Ok)
        assert result.value.start_date == date(2026, 3, 1)
        assert result.value.end_date == date(2026, 3, 5)

    def test_create_truncates_datetimes_to_utc_dates(self):
        start = datetime(2026, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        result = DateRange.create(start, date(2026, 3, 5))
        assert result.value.start_date == date(2026, 3, 2)

    def test_start_equal_to_end_rejected(self):
        result = DateRange.create("2026-03-01", "2026-03-01")
        assert isinstance(result, Err)
        assert result.kind == ErrorKind.VALIDATION
        assert result.error.code == "InvalidRange"

    def test_start_after_end_rejected(self):
        result = DateRange.create("2026-03-05", "2026-03-01")
        assert result.error.code == "InvalidRange"

    @pytest.mark.parametrize("bad", ["2026-02-30", "03/01/2026", "", None, 20260301])
    def test_invalid_dates_rejected(self, bad):
        result = DateRange.create(bad, "2026-03-05")
        assert isinstance(result, Err)
        assert result.error.code == "InvalidDate"

    def test_constructor_guards_programmer_errors(self):
        with pytest.raises(ValueError, match="must be before"):
            DateRange(date(2026, 3, 5), date(2026, 3, 1))

    def test_duration_is_inclusive(self):
        assert DateRange(date(2026, 1, 1), date(2026, 1, 3)).duration_days == 3

    def test_ranges_sharing_a_boundary_day_overlap(self):
        a = DateRange(date(2026, 3, 1), date(2026, 3, 5))
        b = DateRange(date(2026, 3, 5), date(2026, 3, 8))
        assert a.overlaps_with(b)

    def test_disjoint_ranges_do_not_overlap(self):
        a = DateRange(date(2026, 3, 1), date(2026, 3, 4))
        b = DateRange(date(2026, 3, 5), date(2026, 3, 8))
        assert not a.overlaps_with(b)

    def test_overlap_is_symmetric(self):
        ranges = [
            DateRange(date(2026, 3, s), date(2026, 3, e))
            for s, e in [(1, 3), (2, 6), (3, 4), (5, 9), (10, 12), (1, 12)]
        ]
        for a in ranges:
            for b in ranges:
                assert a.overlaps_with(b) == b.overlaps_with(a)

    def test_contains(self):
        r = DateRange(date(2026, 3, 1), date(2026, 3, 5))
        assert r.contains(date(2026, 3, 1))
        assert r.contains(date(2026, 3, 5))
        assert not r.contains(date(2026, 3, 6))
        assert r.contains_range(DateRange(date(2026, 3, 2), date(2026, 3, 4)))
        assert not r.contains_range(DateRange(date(2026, 3, 2), date(2026, 3, 6)))

    def test_format(self):
        r = DateRange(date(2026, 3, 1), date(2026, 3, 5))
        assert r.format() == "2026-03-01 to 2026-03-05"
        assert str(r) == r.format()


class TestCountRentalDays:

    def test_counts_inclusive_days(self):
        assert count_rental_days("2026-03-01", "2026-03-10").value == 10

    def test_same_day_follows_date_range_rule(self):
        result = count_rental_days("2026-03-01", "2026-03-01")
        assert isinstance(result, Err)
        assert result.error.code == "InvalidRange"


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(1050)
        assert m.cents == 1050
        assert m.currency == "USD"

    def test_from_cents_accepts_integral_float(self):
        assert Money.from_cents(1000.0).value == Money(1000)

    def test_from_cents_rejects_fractional_cents(self):
        result = Money.from_cents(10.5)
        assert isinstance(result, Err)
        assert result.error.code == "NotWholeCents"

    def test_from_cents_rejects_negative(self):
        result = Money.from_cents(-1)
        assert result.kind == ErrorKind.VALIDATION
        assert result.error.code == "Negative"

    def test_from_dollars_rounds_half_up(self):
        assert Money.from_dollars("10.005").value.cents == 1001
        assert Money.from_dollars(Decimal("25.99")).value.cents == 2599

    def test_from_dollars_rejects_garbage(self):
        assert isinstance(Money.from_dollars("ten"), Err)

    def test_constructor_guards_programmer_errors(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            Money(-1)
        with pytest.raises(TypeError):
            Money(1.5)

    def test_addition(self):
        assert Money(1000).add(Money(550)).value == Money(1550)

    def test_subtraction(self):
        assert Money(1000).subtract(Money(300)).value == Money(700)

    def test_subtraction_going_negative_rejected(self):
        result = Money(500).subtract(Money(1000))
        assert result.error.code == "Underflow"

    def test_currency_mismatch_rejected(self):
        result = Money(1000, "USD").add(Money(500, "EUR"))
        assert result.error.code == "CurrencyMismatch"

    def test_multiplication_by_int(self):
        assert Money(750).multiply(3).value == Money(2250)

    def test_multiplication_by_fraction_rounds_half_up(self):
        assert Money(1005).multiply(Decimal("0.5")).value == Money(503)

    def test_negative_factor_rejected(self):
        assert Money(100).multiply(-1).error.code == "Negative"
        assert Money(100).multiply(Decimal("-0.5")).error.code == "Negative"

    @pytest.mark.parametrize("factor", [float("nan"), float("inf"), float("-inf"), Decimal("NaN")])
    def test_non_finite_factor_rejected(self, factor):
        result = Money(100).multiply(factor)
        assert isinstance(result, Err)
        assert result.error.code == "InvalidFactor"

    def test_str_formatting(self):
        assert str(Money(1500)) == "$15.00"
        assert str(Money(950)) == "$9.50"
        assert Money(950).format() == "USD 9.50"

    def test_other_currencies_show_their_code(self):
        assert str(Money(950, "EUR")) == "9.50 EUR"
        assert Money(950, "EUR").format() == "EUR 9.50"

    def test_comparison_operators(self):
        assert Money(500) < Money(1000)
        assert Money(1000) > Money(500)
        assert Money(1000) >= Money(1000)

    def test_comparison_across_currencies_raises(self):
        with pytest.raises(ValueError, match="Cannot compare"):
            Money(100, "USD") < Money(100, "EUR")

    def test_zero(self):
        assert Money.zero("EUR") == Money(0, "EUR")
