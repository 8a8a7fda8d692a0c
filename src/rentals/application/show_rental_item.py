"""Application services: rental item queries."""

from __future__ import annotations

from rentals.application.dto import RentalItemDTO, rental_item_to_dto
from rentals.domain.repository.rental_item_repository import RentalItemRepository
from rentals.domain.result import Ok, Result, not_found


class ShowRentalItemHandler:

    def __init__(self, item_repo: RentalItemRepository) -> None:
        self._item_repo = item_repo

    async def handle(self, item_id: str) -> Result[RentalItemDTO]:
        item = await self._item_repo.get_by_id(item_id)
        if item is None:
            return not_found(f"Rental item '{item_id}' not found")
        return Ok(rental_item_to_dto(item))


class ListRentalItemsHandler:

    def __init__(self, item_repo: RentalItemRepository) -> None:
        self._item_repo = item_repo

    async def handle(self, shop: str) -> Result[list[RentalItemDTO]]:
        items = await self._item_repo.list_by_shop(shop)
        items.sort(key=lambda i: (i.external_product_id, i.id))
        return Ok([rental_item_to_dto(i) for i in items])
