"""CLI commands for the RentalItem aggregate."""

from __future__ import annotations

import click

from rentals.application.add_rental_item import AddRentalItemHandler
from rentals.application.check_availability import CheckAvailabilityHandler
from rentals.application.delete_rental_item import DeleteRentalItemHandler
from rentals.application.quote_pricing import QuotePricingHandler
from rentals.application.show_calendar import ShowCalendarHandler
from rentals.application.show_rental_item import (
    ListRentalItemsHandler,
    ShowRentalItemHandler,
)
from rentals.application.update_rental_item import UpdateRentalItemHandler
from rentals.domain.model.rate_tier import PricingAlgorithm
from rentals.infrastructure.bootstrap import booking_repository, rental_item_repository
from rentals.infrastructure.cli.common import format_cents, parse_tiers, run

ALGORITHM_CHOICE = click.Choice([a.value for a in PricingAlgorithm], case_sensitive=False)


def _display_item(dto) -> None:
    click.echo(f"Rental item {dto.id}")
    click.echo(f"Shop:      {dto.shop}")
    click.echo(f"Product:   {dto.external_product_id}  {dto.name or ''}".rstrip())
    click.echo(f"Quantity:  {dto.quantity}")
    click.echo(
        f"Pricing:   {dto.pricing_algorithm}, base "
        f"{format_cents(dto.base_price_per_day_cents, dto.currency_code)}/day"
    )
    for tier in dto.rate_tiers:
        click.echo(
            f"  {tier.min_days:>3}+ days  "
            f"{format_cents(tier.price_per_day_cents, dto.currency_code)}/day"
        )


@click.command("add")
@click.option("--shop", required=True, help="Shop domain.")
@click.option("--product", "product_id", required=True, help="External product ID.")
@click.option("--price", "price_cents", required=True, type=int, help="Base price per day, in cents.")
@click.option("--currency", default="USD", show_default=True)
@click.option("--quantity", default=1, show_default=True, type=int, help="Units that can be rented at once.")
@click.option("--algorithm", type=ALGORITHM_CHOICE, default="FLAT", show_default=True)
@click.option("--tiers", default=None, help="Rate tiers as 'MinDays:Cents,MinDays:Cents'.")
@click.option("--name", default=None, help="Display name.")
def item_add(
    shop: str,
    product_id: str,
    price_cents: int,
    currency: str,
    quantity: int,
    algorithm: str,
    tiers: str | None,
    name: str | None,
) -> None:
    """Make a product rentable."""
    handler = AddRentalItemHandler(item_repo=rental_item_repository())
    dto = run(
        handler.handle(
            shop=shop,
            external_product_id=product_id,
            base_price_per_day_cents=price_cents,
            currency_code=currency,
            pricing_algorithm=PricingAlgorithm(algorithm.upper()),
            quantity=quantity,
            rate_tiers=parse_tiers(tiers),
            name=name,
        )
    )
    click.echo(f"Rental item {dto.id} added.")


@click.command("list")
@click.option("--shop", required=True, help="Shop domain.")
def item_list(shop: str) -> None:
    """List the rental items of a shop."""
    handler = ListRentalItemsHandler(item_repo=rental_item_repository())
    items = run(handler.handle(shop))
    if not items:
        click.echo("No rental items.")
        return
    click.echo(f"  {'ID':<34} {'Product':<16} {'Qty':>5} {'Pricing':>8}")
    click.echo(f"  {'-'*66}")
    for dto in items:
        click.echo(
            f"  {dto.id:<34} {dto.external_product_id:<16} {dto.quantity:>5} "
            f"{dto.pricing_algorithm:>8}"
        )


@click.command("show")
@click.option("--id", "item_id", required=True, help="Rental item ID.")
def item_show(item_id: str) -> None:
    """Show a rental item's configuration."""
    handler = ShowRentalItemHandler(item_repo=rental_item_repository())
    _display_item(run(handler.handle(item_id)))


@click.command("update")
@click.option("--id", "item_id", required=True, help="Rental item ID.")
@click.option("--price", "price_cents", type=int, default=None, help="Base price per day, in cents.")
@click.option("--algorithm", type=ALGORITHM_CHOICE, default=None)
@click.option("--tiers", default=None, help="Rate tiers as 'MinDays:Cents,...'; '' clears them.")
@click.option("--quantity", type=int, default=None)
@click.option("--name", default=None)
def item_update(
    item_id: str,
    price_cents: int | None,
    algorithm: str | None,
    tiers: str | None,
    quantity: int | None,
    name: str | None,
) -> None:
    """Update pricing, quantity or name of a rental item."""
    handler = UpdateRentalItemHandler(item_repo=rental_item_repository())
    dto = run(
        handler.handle(
            item_id,
            base_price_per_day_cents=price_cents,
            pricing_algorithm=PricingAlgorithm(algorithm.upper()) if algorithm else None,
            rate_tiers=parse_tiers(tiers),
            quantity=quantity,
            name=name,
        )
    )
    _display_item(dto)


@click.command("delete")
@click.option("--shop", required=True, help="Shop domain.")
@click.option("--product", "product_id", required=True, help="External product ID.")
def item_delete(shop: str, product_id: str) -> None:
    """Stop renting a product (cancels its open cart holds)."""
    handler = DeleteRentalItemHandler(
        item_repo=rental_item_repository(),
        booking_repo=booking_repository(),
    )
    dto = run(handler.handle(shop, product_id))
    click.echo(
        f"Product {dto.external_product_id} removed, "
        f"{dto.cancelled_reservations} reservation(s) cancelled."
    )


@click.command("quote")
@click.option("--id", "item_id", required=True, help="Rental item ID.")
@click.option("--start", required=True, help="First rental day (YYYY-MM-DD).")
@click.option("--end", required=True, help="Last rental day (YYYY-MM-DD).")
@click.option("--units", default=1, show_default=True, type=int)
def item_quote(item_id: str, start: str, end: str, units: int) -> None:
    """Price a rental."""
    handler = QuotePricingHandler(item_repo=rental_item_repository())
    dto = run(handler.handle(item_id, start, end, units))
    tier = f" (tier {dto.applied_tier_min_days}+ days)" if dto.applied_tier_min_days else ""
    click.echo(
        f"{dto.duration_days} day(s) at "
        f"{format_cents(dto.price_per_day_cents, dto.currency_code)}/day{tier}"
    )
    click.echo(f"Per unit: {format_cents(dto.unit_total_cents, dto.currency_code)}")
    click.echo(f"Total ({dto.units} unit(s)): {format_cents(dto.line_total_cents, dto.currency_code)}")


@click.command("availability")
@click.option("--id", "item_id", required=True, help="Rental item ID.")
@click.option("--start", required=True, help="First rental day (YYYY-MM-DD).")
@click.option("--end", required=True, help="Last rental day (YYYY-MM-DD).")
@click.option("--units", default=1, show_default=True, type=int)
def item_availability(item_id: str, start: str, end: str, units: int) -> None:
    """Check whether units are free for a date range."""
    handler = CheckAvailabilityHandler(
        booking_repo=booking_repository(),
        item_repo=rental_item_repository(),
    )
    dto = run(handler.handle(item_id, start, end, units))
    verdict = "available" if dto.available else "NOT available"
    click.echo(
        f"{units} unit(s) {verdict}: {dto.available_units} of {dto.total_units} free "
        f"({dto.used_units} in use)"
    )
    for conflict in dto.conflicting:
        click.echo(
            f"  {conflict.id}  {conflict.start_date} to {conflict.end_date}  "
            f"x{conflict.units}  {conflict.status}"
        )


@click.command("calendar")
@click.option("--id", "item_id", required=True, help="Rental item ID.")
@click.option("--year", required=True, type=int)
@click.option("--month", required=True, type=int)
def item_calendar(item_id: str, year: int, month: int) -> None:
    """Show a rental item's bookings for a month."""
    handler = ShowCalendarHandler(
        booking_repo=booking_repository(),
        item_repo=rental_item_repository(),
    )
    dto = run(handler.handle(item_id, year, month))
    click.echo(f"Bookings for {year}-{month:02d}")
    if not dto.bookings:
        click.echo("  (none)")
        return
    for b in dto.bookings:
        click.echo(
            f"  {b.start_date} to {b.end_date}  x{b.units:<3} {b.status:<10} "
            f"{b.fulfillment_method:<8} {b.order_id or ''}"
        )
