"""Cache-aside decorator for a RentalItemRepository.

Rental configuration is read on every availability check and quote but
changes rarely.  Entries expire after ``ttl`` and are dropped on every
write through this repository.  Items are copied in and out so callers
can mutate what they get without touching the cache.
"""

from __future__ import annotations

import copy
from datetime import datetime, timedelta

from rentals.domain.clock import Clock, utc_now
from rentals.domain.model.rental_item import RentalItem
from rentals.domain.repository.rental_item_repository import RentalItemRepository


class CachedRentalItemRepository(RentalItemRepository):

    def __init__(
        self,
        inner: RentalItemRepository,
        ttl: timedelta = timedelta(hours=1),
        clock: Clock = utc_now,
    ) -> None:
        self._inner = inner
        self._ttl = ttl
        self._clock = clock
        self._by_id: dict[str, tuple[datetime, RentalItem]] = {}
        self._by_product: dict[tuple[str, str], str] = {}

    async def get_by_id(self, item_id: str) -> RentalItem | None:
        cached = self._lookup(item_id)
        if cached is not None:
            return cached
        item = await self._inner.get_by_id(item_id)
        if item is not None:
            self._store(item)
        return item

    async def get_by_external_product(
        self, shop: str, external_product_id: str
    ) -> RentalItem | None:
        item_id = self._by_product.get((shop, external_product_id))
        if item_id is not None:
            cached = self._lookup(item_id)
            if cached is not None:
                return cached
        item = await self._inner.get_by_external_product(shop, external_product_id)
        if item is not None:
            self._store(item)
        return item

    async def list_by_shop(self, shop: str) -> list[RentalItem]:
        return await self._inner.list_by_shop(shop)

    async def save(self, item: RentalItem) -> None:
        self.invalidate(item.id)
        await self._inner.save(item)

    async def delete(self, item_id: str) -> None:
        self.invalidate(item_id)
        await self._inner.delete(item_id)

    def invalidate(self, item_id: str) -> None:
        entry = self._by_id.pop(item_id, None)
        if entry is not None:
            _, item = entry
            self._by_product.pop((item.shop, item.external_product_id), None)

    # --- Internal helpers -----------------------------------------------------

    def _lookup(self, item_id: str) -> RentalItem | None:
        entry = self._by_id.get(item_id)
        if entry is None:
            return None
        cached_at, item = entry
        if self._clock() - cached_at > self._ttl:
            self.invalidate(item_id)
            return None
        return copy.deepcopy(item)

    def _store(self, item: RentalItem) -> None:
        self._by_id[item.id] = (self._clock(), copy.deepcopy(item))
        self._by_product[(item.shop, item.external_product_id)] = item.id
