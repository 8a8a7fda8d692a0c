"""Tests for the JSON-file repositories and the rental item cache."""

import json
from datetime import timedelta

from rentals.domain.model.booking import Booking, BookingStatus, FulfillmentMethod
from rentals.domain.model.rate_tier import PricingAlgorithm, RateTierSpec
from rentals.infrastructure.persistence.cached_rental_item_repository import (
    CachedRentalItemRepository,
)
from rentals.infrastructure.persistence.json_booking_repository import JsonBookingRepository
from rentals.infrastructure.persistence.json_rental_item_repository import (
    JsonRentalItemRepository,
)
from tests.fakes import NOW, FakeClock, FakeRentalItemRepository, dr, make_item


def _hold(booking_id: str, cart: str = "tok", date_range=None, ttl_minutes: int = 45) -> Booking:
    return Booking.reserve(
        booking_id=booking_id,
        rental_item_id="item-1",
        cart_token=cart,
        date_range=date_range or dr("2026-03-01", "2026-03-05"),
        units=2,
        fulfillment_method=FulfillmentMethod.SHIP,
        ttl=timedelta(minutes=ttl_minutes),
        now=NOW,
    ).value


class TestJsonBookingRepository:

    async def test_creates_empty_file(self, tmp_path):
        path = tmp_path / "nested" / "bookings.json"
        JsonBookingRepository(path)
        assert json.loads(path.read_text()) == []

    async def test_round_trip(self, tmp_path):
        repo = JsonBookingRepository(tmp_path / "bookings.json")
        booking = _hold("b-1")

        await repo.save(booking)
        loaded = await repo.get_by_id("b-1")

        assert loaded == booking
        assert loaded.expires_at == NOW + timedelta(minutes=45)
        assert loaded.fulfillment_method == FulfillmentMethod.SHIP

    async def test_save_upserts(self, tmp_path):
        repo = JsonBookingRepository(tmp_path / "bookings.json")
        booking = _hold("b-1")
        await repo.save(booking)

        booking.confirm("order-1", NOW)
        await repo.save(booking)

        assert len(json.loads((tmp_path / "bookings.json").read_text())) == 1
        loaded = await repo.get_by_id("b-1")
        assert loaded.status == BookingStatus.CONFIRMED
        assert loaded.expires_at is None

    async def test_queries(self, tmp_path):
        repo = JsonBookingRepository(tmp_path / "bookings.json")
        march = _hold("b-1", cart="a")
        april = _hold("b-2", cart="b", date_range=dr("2026-04-01", "2026-04-03"), ttl_minutes=600)
        await repo.save_many([march, april])

        overlapping = await repo.find_overlapping("item-1", dr("2026-03-05", "2026-03-09"))
        by_order = await repo.find_by_order_id("cart:b")
        reserved = await repo.find_reserved_by_rental_item("item-1")
        expired = await repo.find_expired(NOW + timedelta(hours=1))

        assert [b.id for b in overlapping] == ["b-1"]
        assert [b.id for b in by_order] == ["b-2"]
        assert {b.id for b in reserved} == {"b-1", "b-2"}
        assert [b.id for b in expired] == ["b-1"]

    async def test_delete_many_ignores_unknown_ids(self, tmp_path):
        repo = JsonBookingRepository(tmp_path / "bookings.json")
        await repo.save_many([_hold("b-1"), _hold("b-2")])

        await repo.delete_many(["b-1", "missing"])
        await repo.delete("also-missing")

        assert await repo.get_by_id("b-1") is None
        assert await repo.get_by_id("b-2") is not None


class TestJsonRentalItemRepository:

    async def test_round_trip(self, tmp_path):
        repo = JsonRentalItemRepository(tmp_path / "items.json")
        item = make_item(
            pricing_algorithm=PricingAlgorithm.TIERED,
            rate_tiers=[RateTierSpec(3, 800)],
            name="Kayak",
        )

        await repo.save(item)

        assert await repo.get_by_id("item-1") == item
        assert await repo.get_by_external_product(item.shop, "P-100") == item
        assert await repo.get_by_external_product("other", "P-100") is None
        assert await repo.list_by_shop(item.shop) == [item]

    async def test_delete(self, tmp_path):
        repo = JsonRentalItemRepository(tmp_path / "items.json")
        await repo.save(make_item())
        await repo.delete("item-1")
        assert await repo.get_by_id("item-1") is None


class TestCachedRentalItemRepository:

    async def test_repeated_reads_hit_cache(self):
        inner = FakeRentalItemRepository([make_item()])
        repo = CachedRentalItemRepository(inner, ttl=timedelta(minutes=5), clock=FakeClock())

        await repo.get_by_id("item-1")
        await repo.get_by_id("item-1")
        await repo.get_by_external_product("demo.myshop.com", "P-100")

        assert inner.reads == 1

    async def test_entries_expire(self):
        inner = FakeRentalItemRepository([make_item()])
        clock = FakeClock()
        repo = CachedRentalItemRepository(inner, ttl=timedelta(minutes=5), clock=clock)

        await repo.get_by_id("item-1")
        clock.advance(minutes=6)
        await repo.get_by_id("item-1")

        assert inner.reads == 2

    async def test_save_invalidates(self):
        inner = FakeRentalItemRepository([make_item(quantity=2)])
        repo = CachedRentalItemRepository(inner, clock=FakeClock())
        item = await repo.get_by_id("item-1")

        item.update_quantity(7, NOW)
        await repo.save(item)

        assert (await repo.get_by_id("item-1")).quantity == 7

    async def test_callers_get_private_copies(self):
        inner = FakeRentalItemRepository([make_item(quantity=2)])
        repo = CachedRentalItemRepository(inner, clock=FakeClock())
        await repo.get_by_id("item-1")

        cached = await repo.get_by_id("item-1")
        cached.quantity = 99

        assert (await repo.get_by_id("item-1")).quantity == 2

    async def test_delete_invalidates(self):
        inner = FakeRentalItemRepository([make_item()])
        repo = CachedRentalItemRepository(inner, clock=FakeClock())
        await repo.get_by_id("item-1")

        await repo.delete("item-1")

        assert await repo.get_by_id("item-1") is None
        assert await repo.get_by_external_product("demo.myshop.com", "P-100") is None
