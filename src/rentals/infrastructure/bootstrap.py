"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from rentals.infrastructure.persistence.cached_rental_item_repository import (
    CachedRentalItemRepository,
)
from rentals.infrastructure.persistence.json_booking_repository import (
    JsonBookingRepository,
)
from rentals.infrastructure.persistence.json_rental_item_repository import (
    JsonRentalItemRepository,
)

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    reservation_ttl: timedelta = timedelta(minutes=45)
    item_cache_ttl: timedelta = timedelta(hours=1)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            data_dir=Path(os.environ.get("RENTALS_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            reservation_ttl=timedelta(
                minutes=int(os.environ.get("RENTALS_RESERVATION_TTL_MINUTES", "45"))
            ),
            item_cache_ttl=timedelta(
                seconds=int(os.environ.get("RENTALS_ITEM_CACHE_TTL_SECONDS", "3600"))
            ),
            log_level=os.environ.get("RENTALS_LOG_LEVEL", "WARNING").upper(),
        )


def settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str | int | None = None) -> None:
    logging.basicConfig(
        level=level or settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def booking_repository() -> JsonBookingRepository:
    return JsonBookingRepository(settings().data_dir / "bookings.json")


def rental_item_repository() -> CachedRentalItemRepository:
    config = settings()
    return CachedRentalItemRepository(
        JsonRentalItemRepository(config.data_dir / "rental_items.json"),
        ttl=config.item_cache_ttl,
    )
