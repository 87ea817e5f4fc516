from collections.abc import AsyncGenerator
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from core.config import settings
from core.locks import KeyedLocks
from core.models import ItemPatch, NewItem
from db.database import async_session_maker
from db.item_store import ItemStore, SqlItemStore
from schemas.inventory import (
    AvailabilityRead,
    InventoryItemCreate,
    InventoryItemRead,
    InventoryItemUpdate,
    ItemCountRead,
    StockUpdateRequest,
)
from services.inventory_service import InventoryService

router = APIRouter()


async def get_item_store(request: Request) -> AsyncGenerator[ItemStore, None]:
    """Store installed on app.state (in-memory mode), else a SQL store on a fresh session."""
    store = getattr(request.app.state, "item_store", None)
    if store is not None:
        yield store
        return
    async with async_session_maker() as session:
        yield SqlItemStore(session)


def get_item_locks(request: Request) -> KeyedLocks:
    locks = getattr(request.app.state, "item_locks", None)
    if locks is None:
        locks = request.app.state.item_locks = KeyedLocks()
    return locks


def get_inventory_service(
    store: ItemStore = Depends(get_item_store),
    locks: KeyedLocks = Depends(get_item_locks),
) -> InventoryService:
    return InventoryService(
        store,
        locks,
        default_minimum_stock_level=settings.default_minimum_stock_level,
    )


@router.post("", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    payload: InventoryItemCreate,
    service: InventoryService = Depends(get_inventory_service),
):
    """Create a new inventory item"""
    return await service.create_item(NewItem(**payload.model_dump()))


@router.get("", response_model=List[InventoryItemRead])
async def list_inventory_items(
    category: Optional[str] = None,
    service: InventoryService = Depends(get_inventory_service),
):
    """List all items, or only those in `category` (case-insensitive)"""
    if category and category.strip():
        return await service.list_items_by_category(category)
    return await service.list_items()


@router.get("/low-stock", response_model=List[InventoryItemRead])
async def list_low_stock_items(service: InventoryService = Depends(get_inventory_service)):
    """Items at or below their minimum stock level"""
    return await service.list_low_stock_items()


@router.get("/out-of-stock", response_model=List[InventoryItemRead])
async def list_out_of_stock_items(service: InventoryService = Depends(get_inventory_service)):
    return await service.list_out_of_stock_items()


@router.get("/stats/count", response_model=ItemCountRead)
async def count_inventory_items(service: InventoryService = Depends(get_inventory_service)):
    return {"count": await service.count_items()}


@router.get("/{item_id}", response_model=InventoryItemRead)
async def get_inventory_item(item_id: str, service: InventoryService = Depends(get_inventory_service)):
    """Get an inventory item by ID"""
    return await service.get_item(item_id)


@router.put("/{item_id}", response_model=InventoryItemRead)
@router.patch("/{item_id}", response_model=InventoryItemRead)
async def update_inventory_item(
    item_id: str,
    payload: InventoryItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    """Apply the fields present in the body; absent fields keep their stored value"""
    patch = ItemPatch.from_mapping(payload.model_dump(exclude_unset=True))
    return await service.update_item(item_id, patch)


@router.delete("/{item_id}")
async def delete_inventory_item(item_id: str, service: InventoryService = Depends(get_inventory_service)):
    await service.delete_item(item_id)
    return {"ok": True}


@router.post("/{item_id}/stock/add", response_model=InventoryItemRead)
async def add_stock(
    item_id: str,
    payload: StockUpdateRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    return await service.add_stock(item_id, payload.quantity, reason=payload.reason)


@router.post("/{item_id}/stock/reduce", response_model=InventoryItemRead)
async def reduce_stock(
    item_id: str,
    payload: StockUpdateRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    """Remove units; rejected in full when more are requested than are on hand"""
    return await service.reduce_stock(item_id, payload.quantity, reason=payload.reason)


@router.get("/{item_id}/availability", response_model=AvailabilityRead)
async def check_availability(
    item_id: str,
    quantity: int = Query(...),
    service: InventoryService = Depends(get_inventory_service),
):
    available = await service.check_availability(item_id, quantity)
    return {"item_id": item_id, "quantity": quantity, "available": available}
