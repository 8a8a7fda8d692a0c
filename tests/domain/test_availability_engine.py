"""Unit tests for the AvailabilityEngine domain service."""

from datetime import timedelta

from rentals.domain.model.booking import Booking
from rentals.domain.service.availability_engine import AvailabilityEngine
from tests.fakes import NOW, dr

MARCH_1_5 = dr("2026-03-01", "2026-03-05")


def _confirmed(booking_id: str, units: int, date_range=MARCH_1_5) -> Booking:
    return Booking.create_confirmed(
        booking_id=booking_id,
        rental_item_id="item-1",
        order_id=f"order-{booking_id}",
        date_range=date_range,
        units=units,
        now=NOW,
    ).value


def _reserved(booking_id: str, units: int, ttl: timedelta, date_range=MARCH_1_5) -> Booking:
    return Booking.reserve(
        booking_id=booking_id,
        rental_item_id="item-1",
        cart_token=booking_id,
        date_range=date_range,
        units=units,
        ttl=ttl,
        now=NOW - timedelta(hours=1),
    ).value


class TestAvailabilityScenarios:

    def test_no_bookings(self):
        report = AvailabilityEngine().check_availability(5, MARCH_1_5, 2, [], NOW)
        assert report.available
        assert report.available_units == 5
        assert report.used_units == 0

    def test_confirmed_overlap_blocks_units(self):
        existing = _confirmed("b1", 3)

        report = AvailabilityEngine().check_availability(
            5, dr("2026-03-03", "2026-03-07"), 3, [existing], NOW
        )

        assert not report.available
        assert report.used_units == 3
        assert report.available_units == 2
        assert report.conflicting == [existing]

    def test_expired_reservation_ignored(self):
        expired = _reserved("b1", 3, ttl=timedelta(minutes=30))

        report = AvailabilityEngine().check_availability(5, MARCH_1_5, 5, [expired], NOW)

        assert report.available
        assert report.used_units == 0

    def test_live_reservation_blocks(self):
        live = _reserved("b1", 3, ttl=timedelta(hours=2))
        report = AvailabilityEngine().check_availability(5, MARCH_1_5, 3, [live], NOW)
        assert report.used_units == 3
        assert not report.available

    def test_cancelled_and_returned_never_block(self):
        cancelled = _confirmed("b1", 2)
        cancelled.cancel(now=NOW)
        returned = _confirmed("b2", 2)
        returned.mark_returned(NOW)

        report = AvailabilityEngine().check_availability(
            2, MARCH_1_5, 2, [cancelled, returned], NOW
        )

        assert report.available
        assert report.used_units == 0

    def test_non_overlapping_candidates_ignored(self):
        later = _confirmed("b1", 5, dr("2026-03-06", "2026-03-09"))
        report = AvailabilityEngine().check_availability(5, MARCH_1_5, 5, [later], NOW)
        assert report.available

    def test_overbooked_item_reports_zero(self):
        bookings = [_confirmed("b1", 2), _confirmed("b2", 2)]
        report = AvailabilityEngine().check_availability(3, MARCH_1_5, 1, bookings, NOW)
        assert report.used_units == 4
        assert report.available_units == 0
        assert not report.available


class TestAvailabilityMonotonicity:

    def test_adding_blocking_booking_never_increases_availability(self):
        engine = AvailabilityEngine()
        bookings = []
        previous = engine.check_availability(4, MARCH_1_5, 1, bookings, NOW).available_units

        for i in range(6):
            bookings.append(_confirmed(f"b{i}", 1))
            current = engine.check_availability(4, MARCH_1_5, 1, bookings, NOW).available_units
            assert current <= previous
            previous = current

    def test_removing_blocking_booking_never_decreases_availability(self):
        engine = AvailabilityEngine()
        bookings = [_confirmed(f"b{i}", 2) for i in range(3)]
        previous = engine.check_availability(5, MARCH_1_5, 1, bookings, NOW).available_units

        while bookings:
            bookings.pop()
            current = engine.check_availability(5, MARCH_1_5, 1, bookings, NOW).available_units
            assert current >= previous
            previous = current
