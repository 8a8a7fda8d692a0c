"""Application service: Quote Pricing use case (query).

The domain calculator prices a single unit; this handler scales the
result by the requested number of units.
"""

from __future__ import annotations

from rentals.application.check_availability import check_requested_units
from rentals.application.dto import QuoteDTO
from rentals.domain.model.value_objects import count_rental_days
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import Ok, Result, not_found


class QuotePricingHandler:

    def __init__(self, item_repo: RentalItemRepository) -> None:
        self._item_repo = item_repo

    async def handle(
        self,
        rental_item_id: str,
        start_date: object,
        end_date: object,
        units: int = 1,
    ) -> Result[QuoteDTO]:
        units_result = check_requested_units(units)
        if not isinstance(units_result, Ok):
            return units_result
        days = count_rental_days(start_date, end_date)
        if not isinstance(days, Ok):
            return days

        item = await self._item_repo.get_by_id(rental_item_id)
        if item is None:
            return not_found(f"Rental item '{rental_item_id}' not found")

        quote = item.quote(days.value)
        if not isinstance(quote, Ok):
            return quote
        line_total = quote.value.total.multiply(units)
        if not isinstance(line_total, Ok):
            return line_total

        applied = quote.value.applied_tier
        return Ok(
            QuoteDTO(
                rental_item_id=item.id,
                duration_days=days.value,
                units=units,
                price_per_day_cents=quote.value.price_per_day.cents,
                unit_total_cents=quote.value.total_cents,
                line_total_cents=line_total.value.cents,
                currency_code=item.currency_code,
                algorithm=item.pricing_algorithm.value,
                applied_tier_min_days=applied.min_days if applied else None,
            )
        )
