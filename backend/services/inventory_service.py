"""
Inventory domain service.

Owns every stock rule: input validation, the restock-threshold default, the
guarded decrement and the derived stock flags on the views it returns.
Mutations of one item run under that item's lock from KeyedLocks, so the
read, the check and the write happen as one step per id while different
items proceed in parallel.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional

from core.converters import item_to_view
from core.exceptions import (
    InsufficientStockError,
    InvalidArgumentError,
    InventoryValidationError,
    ItemNotFoundError,
)
from core.locks import KeyedLocks
from core.models import InventoryItem, ItemPatch, NewItem, is_set
from db.item_store import ItemStore

logger = logging.getLogger(__name__)

DEFAULT_MINIMUM_STOCK_LEVEL = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _required_text(field: str, value: Any) -> str:
    if value is None or not isinstance(value, str):
        raise InventoryValidationError(field, "is required")
    value = value.strip()
    if not value:
        raise InventoryValidationError(field, "must not be blank")
    return value


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InventoryValidationError("description", "must be a string")
    return value


def _non_negative_int(field: str, value: Any) -> int:
    # bool is an int subclass, but True is not a quantity
    if value is None or isinstance(value, bool) or not isinstance(value, int):
        raise InventoryValidationError(field, "must be an integer")
    if value < 0:
        raise InventoryValidationError(field, "must be non-negative")
    return value


def _non_negative_price(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InventoryValidationError("price", "is required")
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InventoryValidationError("price", "must be a decimal number")
    if not price.is_finite():
        raise InventoryValidationError("price", "must be a finite number")
    if price < 0:
        raise InventoryValidationError("price", "must be non-negative")
    return price


def _stock_amount(amount: Any) -> int:
    if amount is None or isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidArgumentError("quantity", amount, "Stock quantity must be an integer")
    if amount < 0:
        raise InvalidArgumentError("quantity", amount, "Stock quantity must be non-negative")
    return amount


class InventoryService:
    def __init__(
        self,
        store: ItemStore,
        locks: KeyedLocks,
        default_minimum_stock_level: int = DEFAULT_MINIMUM_STOCK_LEVEL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.locks = locks
        self.default_minimum_stock_level = default_minimum_stock_level
        self._clock = clock

    def _touch(self, item: InventoryItem) -> None:
        # A clock that steps backwards must not put updated_at before created_at
        item.updated_at = max(self._clock(), item.created_at)

    async def _require(self, item_id: str, for_update: bool = False) -> InventoryItem:
        item = await self.store.find_by_id(item_id, for_update=for_update)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    async def create_item(self, data: NewItem) -> Dict:
        name = _required_text("name", data.name)
        category = _required_text("category", data.category)
        description = _optional_text(data.description)
        quantity = _non_negative_int("quantity", data.quantity)
        price = _non_negative_price(data.price)
        if data.minimum_stock_level is None:
            minimum_stock_level = self.default_minimum_stock_level
        else:
            minimum_stock_level = _non_negative_int("minimum_stock_level", data.minimum_stock_level)

        logger.info("Creating new inventory item: %s", name)
        now = self._clock()
        item = InventoryItem(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            category=category,
            quantity=quantity,
            price=price,
            minimum_stock_level=minimum_stock_level,
            created_at=now,
            updated_at=now,
        )
        saved = await self.store.save(item)
        logger.info("Created inventory item with ID: %s", saved.id)
        return item_to_view(saved)

    async def get_item(self, item_id: str) -> Dict:
        logger.info("Fetching inventory item with ID: %s", item_id)
        return item_to_view(await self._require(item_id))

    async def list_items(self) -> List[Dict]:
        return [item_to_view(it) for it in await self.store.find_all()]

    async def list_items_by_category(self, category: str) -> List[Dict]:
        logger.info("Fetching inventory items by category: %s", category)
        return [item_to_view(it) for it in await self.store.find_by_category(category)]

    async def list_low_stock_items(self) -> List[Dict]:
        return [item_to_view(it) for it in await self.store.find_low_stock()]

    async def list_out_of_stock_items(self) -> List[Dict]:
        return [item_to_view(it) for it in await self.store.find_out_of_stock()]

    async def update_item(self, item_id: str, patch: ItemPatch) -> Dict:
        logger.info("Updating inventory item with ID: %s (fields: %s)", item_id, patch.changed_fields())

        # Validate the whole patch before touching the item
        changes: Dict[str, Any] = {}
        if is_set(patch.name):
            changes["name"] = _required_text("name", patch.name)
        if is_set(patch.description):
            changes["description"] = _optional_text(patch.description)
        if is_set(patch.category):
            changes["category"] = _required_text("category", patch.category)
        if is_set(patch.quantity):
            changes["quantity"] = _non_negative_int("quantity", patch.quantity)
        if is_set(patch.price):
            changes["price"] = _non_negative_price(patch.price)
        if is_set(patch.minimum_stock_level):
            changes["minimum_stock_level"] = _non_negative_int(
                "minimum_stock_level", patch.minimum_stock_level
            )

        async with self.locks.hold(item_id):
            item = await self._require(item_id, for_update=True)
            for field, value in changes.items():
                setattr(item, field, value)
            self._touch(item)
            saved = await self.store.save(item)

        logger.info("Updated inventory item with ID: %s", item_id)
        return item_to_view(saved)

    async def delete_item(self, item_id: str) -> None:
        logger.info("Deleting inventory item with ID: %s", item_id)
        async with self.locks.hold(item_id):
            if not await self.store.exists_by_id(item_id):
                raise ItemNotFoundError(item_id)
            await self.store.delete_by_id(item_id)
        logger.info("Deleted inventory item with ID: %s", item_id)

    async def add_stock(self, item_id: str, amount: int, reason: Optional[str] = None) -> Dict:
        amount = _stock_amount(amount)
        logger.info("Adding stock for item ID: %s, quantity: %s, reason: %s", item_id, amount, reason)

        async with self.locks.hold(item_id):
            item = await self._require(item_id, for_update=True)
            item.quantity += amount
            self._touch(item)
            saved = await self.store.save(item)

        logger.info("Added %s units to item ID: %s. New quantity: %s", amount, item_id, saved.quantity)
        return item_to_view(saved)

    async def reduce_stock(self, item_id: str, amount: int, reason: Optional[str] = None) -> Dict:
        amount = _stock_amount(amount)
        logger.info("Reducing stock for item ID: %s, quantity: %s, reason: %s", item_id, amount, reason)

        async with self.locks.hold(item_id):
            item = await self._require(item_id, for_update=True)
            if amount > item.quantity:
                logger.warning(
                    "Rejected reduction for item ID: %s. Requested: %s, Available: %s",
                    item_id, amount, item.quantity,
                )
                raise InsufficientStockError(item_id, amount, item.quantity)
            item.quantity -= amount
            self._touch(item)
            saved = await self.store.save(item)

        logger.info("Reduced %s units from item ID: %s. New quantity: %s", amount, item_id, saved.quantity)
        return item_to_view(saved)

    async def check_availability(self, item_id: str, quantity: int) -> bool:
        logger.info("Checking availability for item ID: %s, quantity: %s", item_id, quantity)
        item = await self._require(item_id)
        return item.quantity >= quantity

    async def count_items(self) -> int:
        return await self.store.count()
