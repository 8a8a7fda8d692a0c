"""CLI commands for the Booking aggregate."""

from __future__ import annotations

import click

from rentals.application.cleanup_expired import CleanupExpiredReservationsHandler
from rentals.application.confirm_booking import ConfirmBookingHandler
from rentals.application.create_reservation import CreateReservationHandler
from rentals.application.promote_booking import PromoteBookingByDatesHandler
from rentals.application.release_reservation import ReleaseReservationHandler
from rentals.application.return_booking import MarkBookingReturnedHandler
from rentals.domain.model.booking import FulfillmentMethod
from rentals.infrastructure.bootstrap import (
    booking_repository,
    rental_item_repository,
    settings,
)
from rentals.infrastructure.cli.common import FULFILLMENT_CHOICE, run


def _display_booking(dto) -> None:
    click.echo(f"Booking {dto.id}  (status={dto.status})")
    click.echo(f"Item:     {dto.rental_item_id}")
    click.echo(f"Dates:    {dto.start_date} to {dto.end_date} ({dto.duration_days} days)")
    click.echo(f"Units:    {dto.units}")
    click.echo(f"Order:    {dto.order_id or '-'}")
    click.echo(f"Delivery: {dto.fulfillment_method}")
    if dto.expires_at:
        click.echo(f"Expires:  {dto.expires_at}")


def _method(value: str | None) -> FulfillmentMethod | None:
    return FulfillmentMethod(value.upper()) if value else None


@click.command("reserve")
@click.option("--item", "item_id", required=True, help="Rental item ID.")
@click.option("--cart", "cart_token", required=True, help="Cart token holding the units.")
@click.option("--start", required=True, help="First rental day (YYYY-MM-DD).")
@click.option("--end", required=True, help="Last rental day (YYYY-MM-DD).")
@click.option("--units", default=1, show_default=True, type=int)
@click.option("--fulfillment", type=FULFILLMENT_CHOICE, default="UNKNOWN", show_default=True)
def booking_reserve(
    item_id: str, cart_token: str, start: str, end: str, units: int, fulfillment: str
) -> None:
    """Hold units for a cart until checkout."""
    handler = CreateReservationHandler(
        booking_repo=booking_repository(),
        item_repo=rental_item_repository(),
        reservation_ttl=settings().reservation_ttl,
    )
    dto = run(handler.handle(item_id, cart_token, start, end, units, _method(fulfillment)))
    _display_booking(dto)


@click.command("confirm")
@click.option("--id", "booking_id", required=True, help="Booking ID.")
@click.option("--order", "order_id", required=True, help="Paid order ID.")
@click.option("--units", type=int, default=None, help="Units actually paid for.")
@click.option("--fulfillment", type=FULFILLMENT_CHOICE, default=None)
def booking_confirm(
    booking_id: str, order_id: str, units: int | None, fulfillment: str | None
) -> None:
    """Confirm a held booking for a paid order."""
    handler = ConfirmBookingHandler(booking_repo=booking_repository())
    _display_booking(run(handler.handle(booking_id, order_id, units, _method(fulfillment))))


@click.command("promote")
@click.option("--item", "item_id", required=True, help="Rental item ID.")
@click.option("--start", required=True, help="First rental day (YYYY-MM-DD).")
@click.option("--end", required=True, help="Last rental day (YYYY-MM-DD).")
@click.option("--order", "order_id", required=True, help="Paid order ID.")
@click.option("--units", type=int, default=None)
@click.option("--fulfillment", type=FULFILLMENT_CHOICE, default=None)
def booking_promote(
    item_id: str,
    start: str,
    end: str,
    order_id: str,
    units: int | None,
    fulfillment: str | None,
) -> None:
    """Confirm the oldest hold with exactly these dates."""
    handler = PromoteBookingByDatesHandler(booking_repo=booking_repository())
    dto = run(handler.handle(item_id, start, end, order_id, units, _method(fulfillment)))
    if dto is None:
        click.echo("No matching reservation found.")
        return
    _display_booking(dto)


@click.command("release")
@click.option("--id", "booking_id", required=True, help="Booking ID.")
@click.option("--cart", "cart_token", default=None, help="Cart token that owns the hold.")
def booking_release(booking_id: str, cart_token: str | None) -> None:
    """Drop a cart hold before checkout."""
    handler = ReleaseReservationHandler(booking_repo=booking_repository())
    released = run(handler.handle(booking_id, cart_token))
    click.echo(f"Reservation {released} released.")


@click.command("return")
@click.option("--id", "booking_id", required=True, help="Booking ID.")
def booking_return(booking_id: str) -> None:
    """Mark a confirmed booking as returned."""
    handler = MarkBookingReturnedHandler(booking_repo=booking_repository())
    dto = run(handler.handle(booking_id))
    click.echo(f"Booking {dto.id} returned.")


@click.command("cleanup")
def booking_cleanup() -> None:
    """Delete expired cart holds."""
    handler = CleanupExpiredReservationsHandler(booking_repo=booking_repository())
    dto = run(handler.handle())
    click.echo(f"{dto.deleted_count} expired reservation(s) deleted.")
