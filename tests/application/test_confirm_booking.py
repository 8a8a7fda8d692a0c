"""Integration tests for confirming and promoting bookings."""

from rentals.application.confirm_booking import ConfirmBookingHandler
from rentals.application.create_reservation import CreateReservationHandler
from rentals.application.promote_booking import PromoteBookingByDatesHandler
from rentals.domain.errors import ErrorKind
from rentals.domain.model.booking import BookingStatus, FulfillmentMethod
from rentals.domain.result import Ok
from tests.fakes import FakeBookingRepository, FakeClock, FakeRentalItemRepository, make_item


async def _setup_with_hold(cart: str = "cart-a", units: int = 1):
    clock = FakeClock()
    booking_repo = FakeBookingRepository()
    item_repo = FakeRentalItemRepository([make_item(quantity=5)])
    reserve = CreateReservationHandler(booking_repo, item_repo, clock)
    hold = await reserve.handle("item-1", cart, "2026-03-01", "2026-03-05", units)
    return booking_repo, item_repo, clock, hold.value


class TestConfirmBooking:

    async def test_confirm_by_reference(self):
        booking_repo, _, clock, hold = await _setup_with_hold(units=1)
        handler = ConfirmBookingHandler(booking_repo, clock)

        result = await handler.handle(hold.id, "order-1", 2, FulfillmentMethod.PICKUP)

        dto = result.value
        assert dto.status == "CONFIRMED"
        assert dto.order_id == "order-1"
        assert dto.expires_at is None
        assert dto.units == 2
        assert dto.fulfillment_method == "PICKUP"

    async def test_duplicate_delivery_is_a_noop(self):
        booking_repo, _, clock, hold = await _setup_with_hold()
        handler = ConfirmBookingHandler(booking_repo, clock)
        first = await handler.handle(hold.id, "order-1")
        clock.advance(minutes=5)

        second = await handler.handle(hold.id, "order-1")

        assert isinstance(second, Ok)
        assert second.value == first.value
        confirmed = [b for b in booking_repo.all() if b.status == BookingStatus.CONFIRMED]
        assert len(confirmed) == 1
        assert confirmed[0].pull_events() == []

    async def test_confirm_for_another_order_conflicts(self):
        booking_repo, _, clock, hold = await _setup_with_hold()
        handler = ConfirmBookingHandler(booking_repo, clock)
        await handler.handle(hold.id, "order-1")

        result = await handler.handle(hold.id, "order-2")

        assert result.kind == ErrorKind.STATE_CONFLICT
        assert (await booking_repo.get_by_id(hold.id)).order_id == "order-1"

    async def test_unknown_booking(self):
        booking_repo, _, clock, _ = await _setup_with_hold()
        result = await ConfirmBookingHandler(booking_repo, clock).handle("nope", "order-1")
        assert result.kind == ErrorKind.NOT_FOUND

    async def test_blank_order_rejected(self):
        booking_repo, _, clock, hold = await _setup_with_hold()
        result = await ConfirmBookingHandler(booking_repo, clock).handle(hold.id, "")
        assert result.kind == ErrorKind.VALIDATION


class TestPromoteBookingByDates:

    async def test_promotes_exact_match(self):
        booking_repo, _, clock, hold = await _setup_with_hold()
        handler = PromoteBookingByDatesHandler(booking_repo, clock)

        result = await handler.handle("item-1", "2026-03-01", "2026-03-05", "order-1")

        assert result.value.id == hold.id
        assert result.value.status == "CONFIRMED"

    async def test_no_match_returns_none(self):
        booking_repo, _, clock, _ = await _setup_with_hold()
        handler = PromoteBookingByDatesHandler(booking_repo, clock)

        result = await handler.handle("item-1", "2026-03-01", "2026-03-06", "order-1")

        assert isinstance(result, Ok)
        assert result.value is None

    async def test_oldest_hold_wins(self):
        booking_repo, item_repo, clock, first = await _setup_with_hold(cart="cart-a")
        clock.advance(minutes=1)
        reserve = CreateReservationHandler(booking_repo, item_repo, clock)
        await reserve.handle("item-1", "cart-b", "2026-03-01", "2026-03-05", 1)

        result = await PromoteBookingByDatesHandler(booking_repo, clock).handle(
            "item-1", "2026-03-01", "2026-03-05", "order-1"
        )

        assert result.value.id == first.id

    async def test_cart_token_restricts_match(self):
        booking_repo, item_repo, clock, _ = await _setup_with_hold(cart="cart-a")
        clock.advance(minutes=1)
        reserve = CreateReservationHandler(booking_repo, item_repo, clock)
        second = await reserve.handle("item-1", "cart-b", "2026-03-01", "2026-03-05", 1)

        result = await PromoteBookingByDatesHandler(booking_repo, clock).handle(
            "item-1", "2026-03-01", "2026-03-05", "order-1", cart_token="cart-b"
        )

        assert result.value.id == second.value.id
