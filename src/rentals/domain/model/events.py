"""Booking lifecycle events.

Emitted by valid transitions for downstream notification and audit.
They are not part of a booking's persisted state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class BookingEvent:
    booking_id: str
    occurred_at: datetime

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class BookingCreated(BookingEvent):
    rental_item_id: str
    start_date: date
    end_date: date
    units: int
    status: str


@dataclass(frozen=True)
class BookingConfirmed(BookingEvent):
    order_id: str


@dataclass(frozen=True)
class BookingCancelled(BookingEvent):
    reason: str | None = None


@dataclass(frozen=True)
class BookingReturned(BookingEvent):
    pass
