import os

# Settings are read at import time, so the environment must be in place first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("INVENTORY_STORE", "memory")

import asyncio  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

from core.error_handlers import register_exception_handlers  # noqa: E402
from core.locks import KeyedLocks  # noqa: E402
from core.models import NewItem  # noqa: E402
from db.database import Base  # noqa: E402
from db.inventory_item import InventoryItem as InventoryItemModel  # noqa: E402,F401
from db.item_store import InMemoryItemStore  # noqa: E402
from routers.inventory import router as inventory_router  # noqa: E402
from services.inventory_service import InventoryService  # noqa: E402


class YieldingItemStore(InMemoryItemStore):
    """In-memory store that yields to the event loop on every read and write,
    so concurrent callers actually interleave."""

    async def find_by_id(self, item_id, for_update=False):
        await asyncio.sleep(0)
        item = await super().find_by_id(item_id, for_update=for_update)
        await asyncio.sleep(0)
        return item

    async def save(self, item):
        await asyncio.sleep(0)
        return await super().save(item)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    return InMemoryItemStore()


@pytest.fixture
def service(store):
    return InventoryService(store, KeyedLocks())


@pytest.fixture
async def sql_session():
    engine = create_async_engine("sqlite+aiosqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = async_sessionmaker(engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def client():
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(inventory_router, prefix="/api/v1/inventory")
    app.state.item_store = InMemoryItemStore()
    app.state.item_locks = KeyedLocks()
    return TestClient(app)


def new_item(**overrides) -> NewItem:
    defaults = {
        "name": "Widget",
        "category": "Hardware",
        "quantity": 5,
        "price": Decimal("9.99"),
    }
    defaults.update(overrides)
    return NewItem(**defaults)
