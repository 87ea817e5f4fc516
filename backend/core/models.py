"""
Inventory domain model.

InventoryItem is the record the item stores persist. Stock status is never
stored on it: is_low_stock / is_out_of_stock derive it from quantity and the
restock threshold whenever a view is built.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional


class _Unset:
    """Marker for a patch field the caller did not send."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


def is_low_stock(quantity: int, minimum_stock_level: int) -> bool:
    # Includes out of stock
    return quantity <= minimum_stock_level


def is_out_of_stock(quantity: int) -> bool:
    return quantity <= 0


@dataclass
class InventoryItem:
    id: str
    name: str
    category: str
    quantity: int
    price: Decimal
    minimum_stock_level: int
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None


@dataclass(frozen=True)
class NewItem:
    """Fields accepted when creating an item."""

    name: str
    category: str
    quantity: int
    price: Decimal
    description: Optional[str] = None
    minimum_stock_level: Optional[int] = None


@dataclass(frozen=True)
class ItemPatch:
    """Field-level changes for an update.

    Every field defaults to UNSET and is only applied when set. None is a real
    value: it clears description and is rejected for the other fields.
    """

    name: Any = UNSET
    description: Any = UNSET
    category: Any = UNSET
    quantity: Any = UNSET
    price: Any = UNSET
    minimum_stock_level: Any = UNSET

    @classmethod
    def from_mapping(cls, data: dict) -> "ItemPatch":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def changed_fields(self) -> list[str]:
        return [name for name in self.__dataclass_fields__ if is_set(getattr(self, name))]