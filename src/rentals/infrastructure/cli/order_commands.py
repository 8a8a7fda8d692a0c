"""CLI commands that replay commerce-platform order events."""

from __future__ import annotations

import click

from rentals.application.cancel_bookings import CancelBookingsByOrderHandler
from rentals.application.dto import PaidRentalLine
from rentals.application.record_paid_order import RecordPaidOrderHandler
from rentals.domain.model.booking import FulfillmentMethod
from rentals.infrastructure.bootstrap import booking_repository, rental_item_repository
from rentals.infrastructure.cli.common import FULFILLMENT_CHOICE, run


def _parse_lines(raw: tuple[str, ...]) -> list[PaidRentalLine]:
    """Parse 'Product:Start:End:Units[:BookingId]' values into rental lines."""
    lines: list[PaidRentalLine] = []
    for value in raw:
        parts = [p.strip() for p in value.split(":")]
        if len(parts) not in (4, 5):
            raise click.BadParameter(
                f"Invalid line '{value}'. Expected 'Product:Start:End:Units[:BookingId]'."
            )
        try:
            units = int(parts[3])
        except ValueError:
            raise click.BadParameter(f"Invalid units '{parts[3]}' in line '{value}'.")
        lines.append(
            PaidRentalLine(
                external_product_id=parts[0],
                start_date=parts[1],
                end_date=parts[2],
                units=units,
                booking_ref=parts[4] if len(parts) == 5 and parts[4] else None,
            )
        )
    return lines


@click.command("paid")
@click.option("--shop", required=True, help="Shop domain.")
@click.option("--order", "order_id", required=True, help="Paid order ID.")
@click.option(
    "--line",
    "lines",
    multiple=True,
    required=True,
    help="Rental line as 'Product:Start:End:Units[:BookingId]'. Repeatable.",
)
@click.option("--cart", "cart_token", default=None, help="Cart token the order was checked out from.")
@click.option("--fulfillment", type=FULFILLMENT_CHOICE, default="UNKNOWN", show_default=True)
def order_paid(
    shop: str,
    order_id: str,
    lines: tuple[str, ...],
    cart_token: str | None,
    fulfillment: str,
) -> None:
    """Record a paid order: confirm or create its bookings."""
    handler = RecordPaidOrderHandler(
        booking_repo=booking_repository(),
        item_repo=rental_item_repository(),
    )
    dto = run(
        handler.handle(
            shop,
            order_id,
            _parse_lines(lines),
            FulfillmentMethod(fulfillment.upper()),
            cart_token=cart_token,
        )
    )
    click.echo(f"Order {dto.order_id} recorded.")
    click.echo()
    click.echo(f"  {'Product':<16} {'Dates':<26} {'Units':>5}  {'Outcome':<24} Booking")
    click.echo(f"  {'-'*90}")
    for line in dto.lines:
        click.echo(
            f"  {line.external_product_id:<16} {line.start_date + ' to ' + line.end_date:<26} "
            f"{line.units:>5}  {line.outcome:<24} {line.booking_id or '-'}"
        )


@click.command("cancelled")
@click.option("--order", "order_id", required=True, help="Cancelled order ID.")
@click.option("--reason", default="Order cancelled", show_default=True)
def order_cancelled(order_id: str, reason: str) -> None:
    """Cancel every booking of an order."""
    handler = CancelBookingsByOrderHandler(booking_repo=booking_repository())
    dto = run(handler.handle(order_id, reason))
    click.echo(f"Order {order_id}: {dto.cancelled_count} booking(s) cancelled.")
