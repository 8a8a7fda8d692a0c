"""JSON-file-backed implementation of RentalItemRepository."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from rentals.domain.model.rate_tier import PricingAlgorithm, RateTier
from rentals.domain.model.rental_item import RentalItem
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.rental_item_repository import RentalItemRepository


class JsonRentalItemRepository(RentalItemRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- RentalItemRepository interface ---------------------------------------

    async def get_by_id(self, item_id: str) -> RentalItem | None:
        for raw in self._load_raw():
            if raw["id"] == item_id:
                return self._to_domain(raw)
        return None

    async def get_by_external_product(
        self, shop: str, external_product_id: str
    ) -> RentalItem | None:
        for raw in self._load_raw():
            if raw["shop"] == shop and raw["external_product_id"] == external_product_id:
                return self._to_domain(raw)
        return None

    async def list_by_shop(self, shop: str) -> list[RentalItem]:
        return [self._to_domain(raw) for raw in self._load_raw() if raw["shop"] == shop]

    async def save(self, item: RentalItem) -> None:
        items = self._load_raw()

        replaced = False
        for i, raw in enumerate(items):
            if raw["id"] == item.id:
                items[i] = self._to_raw(item)
                replaced = True
                break
        if not replaced:
            items.append(self._to_raw(item))

        self._persist_raw(items)

    async def delete(self, item_id: str) -> None:
        items = self._load_raw()
        kept = [raw for raw in items if raw["id"] != item_id]
        if len(kept) != len(items):
            self._persist_raw(kept)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: RentalItem) -> dict:
        return {
            "id": item.id,
            "shop": item.shop,
            "external_product_id": item.external_product_id,
            "name": item.name,
            "image_url": item.image_url,
            "currency_code": item.currency_code,
            "base_price_per_day_cents": item.base_price_per_day.cents,
            "pricing_algorithm": item.pricing_algorithm.value,
            "quantity": item.quantity,
            "rate_tiers": [
                {"min_days": t.min_days, "price_per_day_cents": t.price_per_day.cents}
                for t in item.rate_tiers
            ],
            "created_at": item.created_at.isoformat(),
            "updated_at": item.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> RentalItem:
        currency = raw["currency_code"]
        return RentalItem(
            id=raw["id"],
            shop=raw["shop"],
            external_product_id=raw["external_product_id"],
            currency_code=currency,
            base_price_per_day=Money(raw["base_price_per_day_cents"], currency),
            pricing_algorithm=PricingAlgorithm(raw.get("pricing_algorithm", "FLAT")),
            quantity=raw.get("quantity", 1),
            rate_tiers=[
                RateTier(t["min_days"], Money(t["price_per_day_cents"], currency))
                for t in raw.get("rate_tiers", [])
            ],
            name=raw.get("name"),
            image_url=raw.get("image_url"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, items: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(items, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
