"""Draining of booking events after a successful save.

There is no message bus in this package; drained events are only
logged, at INFO under this module's logger.
"""

from __future__ import annotations

import logging

from rentals.domain.model.booking import Booking
from rentals.domain.model.events import BookingEvent

logger = logging.getLogger(__name__)


def flush_events(*bookings: Booking) -> list[BookingEvent]:
    """Pull pending events from each booking, in order, and log them."""
    events: list[BookingEvent] = []
    for booking in bookings:
        for event in booking.pull_events():
            logger.info("%s booking=%s", event.name, event.booking_id)
            events.append(event)
    return events
