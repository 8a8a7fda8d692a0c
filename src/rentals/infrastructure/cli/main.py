import click

from rentals.infrastructure.bootstrap import configure_logging
from rentals.infrastructure.cli.booking_commands import (
    booking_cleanup,
    booking_confirm,
    booking_promote,
    booking_release,
    booking_reserve,
    booking_return,
)
from rentals.infrastructure.cli.item_commands import (
    item_add,
    item_availability,
    item_calendar,
    item_delete,
    item_list,
    item_quote,
    item_show,
    item_update,
)
from rentals.infrastructure.cli.order_commands import order_cancelled, order_paid


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log at INFO level.")
def cli(verbose: bool) -> None:
    """Rentals: rental booking management"""
    configure_logging("INFO" if verbose else None)


@cli.group()
def item() -> None:
    """Manage rental items."""


@cli.group()
def booking() -> None:
    """Manage bookings."""


@cli.group()
def order() -> None:
    """Replay order events."""


# Register subcommands
item.add_command(item_add)
item.add_command(item_availability)
item.add_command(item_calendar)
item.add_command(item_delete)
item.add_command(item_list)
item.add_command(item_quote)
item.add_command(item_show)
item.add_command(item_update)
booking.add_command(booking_cleanup)
booking.add_command(booking_confirm)
booking.add_command(booking_promote)
booking.add_command(booking_release)
booking.add_command(booking_reserve)
booking.add_command(booking_return)
order.add_command(order_cancelled)
order.add_command(order_paid)
