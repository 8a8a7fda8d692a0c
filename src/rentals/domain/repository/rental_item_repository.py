"""Abstract repository for RentalItem aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.rental_item import RentalItem


class RentalItemRepository(ABC):

    @abstractmethod
    async def get_by_id(self, item_id: str) -> RentalItem | None:
        """Return a rental item by its ID, or None if not found."""

    @abstractmethod
    async def get_by_external_product(
        self, shop: str, external_product_id: str
    ) -> RentalItem | None:
        """Return the rental item configured for a shop's product, or None."""

    @abstractmethod
    async def list_by_shop(self, shop: str) -> list[RentalItem]:
        """Return every rental item of a shop."""

    @abstractmethod
    async def save(self, item: RentalItem) -> None:
        """Persist a new or updated rental item."""

    @abstractmethod
    async def delete(self, item_id: str) -> None:
        """Remove a rental item's configuration.  Bookings are kept."""
