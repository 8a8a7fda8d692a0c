"""Integration tests for expired-hold cleanup and the booking calendar."""

from rentals.application.cancel_bookings import CancelBookingsByOrderHandler
from rentals.application.cleanup_expired import CleanupExpiredReservationsHandler
from rentals.application.create_confirmed_booking import CreateConfirmedBookingHandler
from rentals.application.create_reservation import CreateReservationHandler
from rentals.application.show_calendar import ShowCalendarHandler
from rentals.domain.errors import ErrorKind
from tests.fakes import FakeBookingRepository, FakeClock, FakeRentalItemRepository, make_item


def _setup():
    clock = FakeClock()
    booking_repo = FakeBookingRepository()
    item_repo = FakeRentalItemRepository([make_item(quantity=10, name="Kayak")])
    reserve = CreateReservationHandler(booking_repo, item_repo, clock)
    create = CreateConfirmedBookingHandler(booking_repo, item_repo, clock)
    return booking_repo, item_repo, clock, reserve, create


class TestCleanupExpired:

    async def test_deletes_only_expired_holds(self):
        booking_repo, _, clock, reserve, create = _setup()
        old = await reserve.handle("item-1", "cart-a", "2026-03-01", "2026-03-05", 1)
        clock.advance(minutes=40)
        fresh = await reserve.handle("item-1", "cart-b", "2026-03-01", "2026-03-05", 1)
        paid = await create.handle("item-1", "order-1", "2026-03-01", "2026-03-05", 1)
        clock.advance(minutes=10)

        result = await CleanupExpiredReservationsHandler(booking_repo, clock).handle()

        assert result.value.deleted_count == 1
        assert result.value.booking_ids == [old.value.id]
        remaining = {b.id for b in booking_repo.all()}
        assert remaining == {fresh.value.id, paid.value.id}

    async def test_nothing_to_delete(self):
        booking_repo, _, clock, _, _ = _setup()
        result = await CleanupExpiredReservationsHandler(booking_repo, clock).handle()
        assert result.value.deleted_count == 0

    async def test_running_twice_is_harmless(self):
        booking_repo, _, clock, reserve, _ = _setup()
        await reserve.handle("item-1", "cart-a", "2026-03-01", "2026-03-05", 1)
        clock.advance(hours=1)
        handler = CleanupExpiredReservationsHandler(booking_repo, clock)

        await handler.handle()
        second = await handler.handle()

        assert second.value.deleted_count == 0


class TestShowCalendar:

    async def test_lists_month_bookings_sorted(self):
        booking_repo, item_repo, clock, reserve, create = _setup()
        late = await create.handle("item-1", "order-1", "2026-03-20", "2026-03-22", 1)
        spanning = await create.handle("item-1", "order-2", "2026-02-27", "2026-03-02", 1)
        await create.handle("item-1", "order-3", "2026-04-02", "2026-04-05", 1)
        hold = await reserve.handle("item-1", "cart-a", "2026-03-10", "2026-03-12", 2)

        result = await ShowCalendarHandler(booking_repo, item_repo, clock).handle(
            "item-1", 2026, 3
        )

        bookings = result.value.bookings
        assert [b.id for b in bookings] == [spanning.value.id, hold.value.id, late.value.id]
        assert bookings[0].rental_item_name == "Kayak"
        assert bookings[1].status == "RESERVED"

    async def test_excludes_cancelled_and_expired(self):
        booking_repo, item_repo, clock, reserve, create = _setup()
        await create.handle("item-1", "order-1", "2026-03-01", "2026-03-05", 1)
        await CancelBookingsByOrderHandler(booking_repo, clock).handle("order-1")
        await reserve.handle("item-1", "cart-a", "2026-03-10", "2026-03-12", 1)
        clock.advance(hours=2)

        result = await ShowCalendarHandler(booking_repo, item_repo, clock).handle(
            "item-1", 2026, 3
        )

        assert result.value.bookings == []
        # the expired hold was swept from storage as well
        assert len(booking_repo.all()) == 1

    async def test_invalid_month_rejected(self):
        booking_repo, item_repo, clock, _, _ = _setup()
        handler = ShowCalendarHandler(booking_repo, item_repo, clock)
        assert (await handler.handle("item-1", 2026, 13)).kind == ErrorKind.VALIDATION
        assert (await handler.handle("item-1", 1999, 1)).kind == ErrorKind.VALIDATION

    async def test_unknown_item(self):
        booking_repo, item_repo, clock, _, _ = _setup()
        result = await ShowCalendarHandler(booking_repo, item_repo, clock).handle(
            "nope", 2026, 3
        )
        assert result.kind == ErrorKind.NOT_FOUND
