"""
Item stores: keyed persistence for inventory items.

Stores know nothing about stock rules. They save, look up and scan records;
InventoryService decides what may be written.
"""

import abc
import logging
import uuid
from dataclasses import replace
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.converters import item_to_model_data, model_to_item
from core.models import InventoryItem, is_low_stock, is_out_of_stock
from db.inventory_item import InventoryItem as InventoryItemModel

logger = logging.getLogger(__name__)


class ItemStore(abc.ABC):
    """Async contract shared by the in-memory and SQL stores."""

    @abc.abstractmethod
    async def save(self, item: InventoryItem) -> InventoryItem:
        """Insert or replace the item by id, assigning an id when it has none."""

    @abc.abstractmethod
    async def find_by_id(self, item_id: str, for_update: bool = False) -> Optional[InventoryItem]:
        """Return the item, or None. for_update locks the row until the next save."""

    @abc.abstractmethod
    async def find_all(self) -> List[InventoryItem]:
        ...

    @abc.abstractmethod
    async def find_by_category(self, category: str) -> List[InventoryItem]:
        """Items whose category matches case-insensitively."""

    @abc.abstractmethod
    async def find_low_stock(self) -> List[InventoryItem]:
        ...

    @abc.abstractmethod
    async def find_out_of_stock(self) -> List[InventoryItem]:
        ...

    @abc.abstractmethod
    async def exists_by_id(self, item_id: str) -> bool:
        ...

    @abc.abstractmethod
    async def delete_by_id(self, item_id: str) -> None:
        """Remove the item. Absent ids are ignored."""

    @abc.abstractmethod
    async def count(self) -> int:
        ...


class InMemoryItemStore(ItemStore):
    """Dict-backed store. Records go in and come out as copies."""

    def __init__(self):
        self._items: Dict[str, InventoryItem] = {}

    async def save(self, item: InventoryItem) -> InventoryItem:
        if not item.id:
            item = replace(item, id=str(uuid.uuid4()))
        self._items[item.id] = replace(item)
        return replace(item)

    async def find_by_id(self, item_id: str, for_update: bool = False) -> Optional[InventoryItem]:
        item = self._items.get(item_id)
        return replace(item) if item is not None else None

    async def find_all(self) -> List[InventoryItem]:
        return [replace(it) for it in self._items.values()]

    async def find_by_category(self, category: str) -> List[InventoryItem]:
        wanted = (category or "").strip().casefold()
        return [replace(it) for it in self._items.values() if it.category.casefold() == wanted]

    async def find_low_stock(self) -> List[InventoryItem]:
        return [
            replace(it)
            for it in self._items.values()
            if is_low_stock(it.quantity, it.minimum_stock_level)
        ]

    async def find_out_of_stock(self) -> List[InventoryItem]:
        return [replace(it) for it in self._items.values() if is_out_of_stock(it.quantity)]

    async def exists_by_id(self, item_id: str) -> bool:
        return item_id in self._items

    async def delete_by_id(self, item_id: str) -> None:
        self._items.pop(item_id, None)

    async def count(self) -> int:
        return len(self._items)


class SqlItemStore(ItemStore):
    """Store backed by the inventory_items table through an AsyncSession.

    save and delete_by_id commit, which also releases any row lock taken by
    find_by_id(for_update=True).
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _scan(self, stmt) -> List[InventoryItem]:
        res = await self.session.execute(stmt.order_by(func.lower(InventoryItemModel.name).asc()))
        return [model_to_item(m) for m in res.scalars().all()]

    async def save(self, item: InventoryItem) -> InventoryItem:
        item_id = item.id or str(uuid.uuid4())
        model = await self.session.get(InventoryItemModel, item_id)
        if model is None:
            model = InventoryItemModel(id=item_id)
            self.session.add(model)
        for column, value in item_to_model_data(item).items():
            setattr(model, column, value)

        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(model)
        return model_to_item(model)

    async def find_by_id(self, item_id: str, for_update: bool = False) -> Optional[InventoryItem]:
        stmt = select(InventoryItemModel).where(InventoryItemModel.id == item_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        res = await self.session.execute(stmt)
        model = res.scalar_one_or_none()
        return model_to_item(model) if model is not None else None

    async def find_all(self) -> List[InventoryItem]:
        return await self._scan(select(InventoryItemModel))

    async def find_by_category(self, category: str) -> List[InventoryItem]:
        wanted = (category or "").strip().lower()
        return await self._scan(
            select(InventoryItemModel).where(func.lower(InventoryItemModel.category) == wanted)
        )

    async def find_low_stock(self) -> List[InventoryItem]:
        return await self._scan(
            select(InventoryItemModel).where(
                InventoryItemModel.quantity <= InventoryItemModel.minimum_stock_level
            )
        )

    async def find_out_of_stock(self) -> List[InventoryItem]:
        return await self._scan(select(InventoryItemModel).where(InventoryItemModel.quantity <= 0))

    async def exists_by_id(self, item_id: str) -> bool:
        res = await self.session.execute(
            select(InventoryItemModel.id).where(InventoryItemModel.id == item_id)
        )
        return res.scalar_one_or_none() is not None

    async def delete_by_id(self, item_id: str) -> None:
        await self.session.execute(delete(InventoryItemModel).where(InventoryItemModel.id == item_id))
        await self.session.commit()
        logger.debug("Deleted inventory_items row %s", item_id)

    async def count(self) -> int:
        res = await self.session.execute(select(func.count()).select_from(InventoryItemModel))
        return int(res.scalar_one())
