from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict

from core.models import InventoryItem, is_low_stock, is_out_of_stock
from db.inventory_item import InventoryItem as InventoryItemModel


def _aware(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; everything is stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def model_to_item(model: InventoryItemModel) -> InventoryItem:
    """Convert SQLAlchemy row to the domain record"""
    return InventoryItem(
        id=model.id,
        name=model.name,
        description=model.description,
        category=model.category,
        quantity=int(model.quantity),
        price=Decimal(str(model.price)),
        minimum_stock_level=int(model.minimum_stock_level),
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
    )


def item_to_model_data(item: InventoryItem) -> Dict:
    """Convert the domain record to column values for the SQLAlchemy row"""
    return {
        "name": item.name,
        "description": item.description,
        "category": item.category,
        "quantity": item.quantity,
        "price": item.price,
        "minimum_stock_level": item.minimum_stock_level,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
    }


def item_to_view(item: InventoryItem) -> Dict:
    """Response view of an item, stock flags derived from the current state"""
    return {
        "id": item.id,
        "name": item.name,
        "description": item.description,
        "category": item.category,
        "quantity": item.quantity,
        "price": item.price,
        "minimum_stock_level": item.minimum_stock_level,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
        "low_stock": is_low_stock(item.quantity, item.minimum_stock_level),
        "out_of_stock": is_out_of_stock(item.quantity),
    }
