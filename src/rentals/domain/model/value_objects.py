"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
Untrusted input goes through the ``create`` / ``from_*`` factories, which
return a ``Result`` instead of raising.  The constructors only guard
against programmer errors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from rentals.domain.result import Ok, Result, validation_error

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _coerce_date(value: object) -> date | None:
    """Reduce a date-like value to a calendar date, or None if it is not one."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not _DATE_ONLY.match(text):
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:  # e.g. 2026-02-30
            return None
    return None


@dataclass(frozen=True)
class DateRange:
    """A rental period of whole calendar days.

    Both ends are inclusive rental days, and ``start_date`` must be
    strictly before ``end_date``.  Two ranges that share a boundary date
    therefore overlap: both rentals use that day.
    """

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.start_date >= self.end_date:
            raise ValueError(
                f"DateRange start {self.start_date} must be before end {self.end_date}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(start: object, end: object) -> Result[DateRange]:
        start_date = _coerce_date(start)
        if start_date is None:
            return validation_error(f"Invalid start date: {start!r}", "InvalidDate")
        end_date = _coerce_date(end)
        if end_date is None:
            return validation_error(f"Invalid end date: {end!r}", "InvalidDate")
        if start_date >= end_date:
            return validation_error(
                f"Start date {start_date} must be before end date {end_date}",
                "InvalidRange",
            )
        return Ok(DateRange(start_date, end_date))

    # --- Queries --------------------------------------------------------------

    @property
    def duration_days(self) -> int:
        """Inclusive day count: Jan 1 to Jan 3 is 3 days."""
        return (self.end_date - self.start_date).days + 1

    def overlaps_with(self, other: DateRange) -> bool:
        return self.start_date <= other.end_date and self.end_date >= other.start_date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def contains_range(self, other: DateRange) -> bool:
        return self.start_date <= other.start_date and self.end_date >= other.end_date

    def format(self) -> str:
        return f"{self.start_date.isoformat()} to {self.end_date.isoformat()}"

    def __str__(self) -> str:
        return self.format()


def count_rental_days(start: object, end: object) -> Result[int]:
    """Number of billable days between two date-only values (inclusive)."""
    result = DateRange.create(start, end)
    if isinstance(result, Ok):
        return Ok(result.value.duration_days)
    return result


@dataclass(frozen=True)
class Money:
    """Monetary amount in whole cents, tagged with a currency.

    Integer cents keep every calculation exact; ``Decimal`` is only used
    when converting from dollars or scaling by a fractional factor.
    """

    cents: int
    currency: str = "USD"

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise TypeError(
                f"Money cents must be an int, got {type(self.cents).__name__}"
            )
        if self.cents < 0:
            raise ValueError(f"Money cents cannot be negative, got {self.cents}")

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def from_cents(cents: int | float | Decimal, currency: str = "USD") -> Result[Money]:
        if isinstance(cents, bool) or not isinstance(cents, (int, float, Decimal)):
            return validation_error(
                f"Money amount must be in whole cents, got {cents!r}", "NotWholeCents"
            )
        if not isinstance(cents, int):
            value = Decimal(str(cents)) if isinstance(cents, float) else cents
            if not value.is_finite() or value != value.to_integral_value():
                return validation_error(
                    f"Money amount must be in whole cents, got {cents!r}",
                    "NotWholeCents",
                )
            cents = int(value)
        if cents < 0:
            return validation_error(
                f"Money amount cannot be negative, got {cents}", "Negative"
            )
        return Ok(Money(cents, currency))

    @staticmethod
    def from_dollars(dollars: str | int | float | Decimal, currency: str = "USD") -> Result[Money]:
        """Convert a dollar amount, rounding half-up to the nearest cent."""
        try:
            amount = Decimal(str(dollars))
        except (InvalidOperation, ValueError):
            return validation_error(f"Invalid money amount: {dollars!r}", "NotWholeCents")
        if not amount.is_finite():
            return validation_error(f"Invalid money amount: {dollars!r}", "NotWholeCents")
        cents = (amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return Money.from_cents(int(cents), currency)

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(0, currency)

    # --- Arithmetic -----------------------------------------------------------

    def add(self, other: Money) -> Result[Money]:
        if self.currency != other.currency:
            return validation_error(
                f"Cannot add {other.currency} to {self.currency}", "CurrencyMismatch"
            )
        return Ok(Money(self.cents + other.cents, self.currency))

    def subtract(self, other: Money) -> Result[Money]:
        if self.currency != other.currency:
            return validation_error(
                f"Cannot subtract {other.currency} from {self.currency}",
                "CurrencyMismatch",
            )
        if other.cents > self.cents:
            return validation_error(
                f"Cannot subtract {other} from {self}", "Underflow"
            )
        return Ok(Money(self.cents - other.cents, self.currency))

    def multiply(self, factor: int | float | Decimal) -> Result[Money]:
        if not isinstance(factor, int):
            try:
                factor = Decimal(str(factor))
            except (InvalidOperation, ValueError):
                return validation_error(f"Invalid factor: {factor!r}", "InvalidFactor")
            if not factor.is_finite():
                return validation_error(
                    f"Cannot multiply money by a non-finite factor ({factor})",
                    "InvalidFactor",
                )
        if factor < 0:
            return validation_error(
                f"Cannot multiply money by a negative factor ({factor})", "Negative"
            )
        if isinstance(factor, int):
            return Ok(Money(self.cents * factor, self.currency))
        product = (Decimal(self.cents) * factor).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        return Money.from_cents(int(product), self.currency)

    # --- Comparison -----------------------------------------------------------

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents < other.cents

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents <= other.cents

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents > other.cents

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.cents >= other.cents

    # --- Display --------------------------------------------------------------

    @property
    def dollars(self) -> Decimal:
        return Decimal(self.cents) / 100

    def format(self) -> str:
        return f"{self.currency} {self.dollars:.2f}"

    def __str__(self) -> str:
        if self.currency == "USD":
            return f"${self.dollars:.2f}"
        return f"{self.dollars:.2f} {self.currency}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValueError(f"Cannot compare {self.currency} with {other.currency}")
