"""Application service: Cleanup Expired Reservations use case.

Expired holds already stop blocking availability the moment they expire;
this sweep only removes them from storage.  Safe to run at any time and
from several places: the set it deletes only ever grows with the clock.
"""

from __future__ import annotations

import logging

from rentals.application.dto import CleanupDTO
from rentals.domain.clock import Clock, utc_now
from rentals.domain.model.booking import BookingStatus
from rentals.domain.repository.booking_repository import BookingRepository
from rentals.domain.result import Ok, Result

logger = logging.getLogger(__name__)


class CleanupExpiredReservationsHandler:

    def __init__(self, booking_repo: BookingRepository, clock: Clock = utc_now) -> None:
        self._booking_repo = booking_repo
        self._clock = clock

    async def handle(self) -> Result[CleanupDTO]:
        now = self._clock()
        expired = [
            b
            for b in await self._booking_repo.find_expired(now)
            if b.status == BookingStatus.RESERVED and b.is_expired(now)
        ]
        if not expired:
            return Ok(CleanupDTO(deleted_count=0))

        ids = [b.id for b in expired]
        await self._booking_repo.delete_many(ids)
        logger.info("Deleted %d expired reservation(s)", len(ids))
        return Ok(CleanupDTO(deleted_count=len(ids), booking_ids=ids))
