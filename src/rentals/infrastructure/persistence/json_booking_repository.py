"""JSON-file-backed implementation of BookingRepository."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path

from rentals.domain.model.booking import Booking, BookingStatus, FulfillmentMethod
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.booking_repository import BookingRepository


class JsonBookingRepository(BookingRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- BookingRepository interface ------------------------------------------

    async def get_by_id(self, booking_id: str) -> Booking | None:
        for raw in self._load_raw():
            if raw["id"] == booking_id:
                return self._to_domain(raw)
        return None

    async def find_by_order_id(self, order_id: str) -> list[Booking]:
        return [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["order_id"] == order_id
        ]

    async def find_overlapping(
        self, rental_item_id: str, date_range: DateRange
    ) -> list[Booking]:
        bookings = (
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["rental_item_id"] == rental_item_id
        )
        return [b for b in bookings if b.date_range.overlaps_with(date_range)]

    async def find_reserved_by_rental_item(self, rental_item_id: str) -> list[Booking]:
        return [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["rental_item_id"] == rental_item_id
            and raw["status"] == BookingStatus.RESERVED.value
        ]

    async def find_expired(self, as_of: datetime) -> list[Booking]:
        bookings = (
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["status"] == BookingStatus.RESERVED.value and raw["expires_at"]
        )
        return [b for b in bookings if b.expires_at < as_of]

    async def save(self, booking: Booking) -> None:
        await self.save_many([booking])

    async def save_many(self, bookings: list[Booking]) -> None:
        records = self._load_raw()
        index = {raw["id"]: i for i, raw in enumerate(records)}

        # Upsert: replace if exists, otherwise append
        for booking in bookings:
            raw = self._to_raw(booking)
            if booking.id in index:
                records[index[booking.id]] = raw
            else:
                index[booking.id] = len(records)
                records.append(raw)

        self._persist_raw(records)

    async def delete(self, booking_id: str) -> None:
        await self.delete_many([booking_id])

    async def delete_many(self, booking_ids: list[str]) -> None:
        doomed = set(booking_ids)
        records = self._load_raw()
        kept = [raw for raw in records if raw["id"] not in doomed]
        if len(kept) != len(records):
            self._persist_raw(kept)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(booking: Booking) -> dict:
        return {
            "id": booking.id,
            "rental_item_id": booking.rental_item_id,
            "order_id": booking.order_id,
            "start_date": booking.date_range.start_date.isoformat(),
            "end_date": booking.date_range.end_date.isoformat(),
            "units": booking.units,
            "status": booking.status.value,
            "fulfillment_method": booking.fulfillment_method.value,
            "expires_at": booking.expires_at.isoformat() if booking.expires_at else None,
            "created_at": booking.created_at.isoformat(),
            "updated_at": booking.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Booking:
        expires_at = raw.get("expires_at")
        return Booking(
            id=raw["id"],
            rental_item_id=raw["rental_item_id"],
            order_id=raw.get("order_id"),
            date_range=DateRange(
                date.fromisoformat(raw["start_date"]),
                date.fromisoformat(raw["end_date"]),
            ),
            units=raw["units"],
            status=BookingStatus(raw["status"]),
            fulfillment_method=FulfillmentMethod(
                raw.get("fulfillment_method", FulfillmentMethod.UNKNOWN.value)
            ),
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, bookings: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(bookings, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
