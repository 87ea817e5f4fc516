import argparse
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

"""
Seed a small demo catalogue of inventory items.

Items go through InventoryService so they get the same validation, ids and
timestamps as items created over the API. Items whose name already exists
(case-insensitive) are skipped unless --reset wipes the table first.

Run inside the api container:
  docker compose exec -T api uv run python scripts/seed_inventory_items.py --reset
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import delete  # noqa: E402

from core.config import settings  # noqa: E402
from core.locks import KeyedLocks  # noqa: E402
from core.models import NewItem  # noqa: E402
from db.database import async_session_maker, create_db_and_tables  # noqa: E402
from db.inventory_item import InventoryItem  # noqa: E402
from db.item_store import SqlItemStore  # noqa: E402
from services.inventory_service import InventoryService  # noqa: E402


SEED_ITEMS = [
    NewItem(name="USB-C Cable 1m", category="Electronics", quantity=120, price=Decimal("7.50"), minimum_stock_level=25),
    NewItem(name="Wireless Mouse", category="Electronics", quantity=8, price=Decimal("24.99")),
    NewItem(name="HDMI Adapter", category="Electronics", quantity=0, price=Decimal("12.00")),
    NewItem(name="A4 Copy Paper (500)", category="Office", quantity=40, price=Decimal("5.49"), minimum_stock_level=15),
    NewItem(name="Ballpoint Pens (10)", category="Office", quantity=3, price=Decimal("3.20"),
            description="Blue ink, medium tip"),
    NewItem(name="Stapler", category="Office", quantity=11, price=Decimal("9.99"), minimum_stock_level=5),
    NewItem(name="Packing Tape", category="Warehouse", quantity=0, price=Decimal("2.75"), minimum_stock_level=20),
    NewItem(name="Pallet Wrap", category="Warehouse", quantity=14, price=Decimal("18.40")),
]


async def seed(reset: bool, dry_run: bool):
    await create_db_and_tables()

    async with async_session_maker() as session:
        store = SqlItemStore(session)
        service = InventoryService(
            store,
            KeyedLocks(),
            default_minimum_stock_level=settings.default_minimum_stock_level,
        )

        if reset and not dry_run:
            await session.execute(delete(InventoryItem))
            await session.commit()
            print("[seed_inventory_items] Removed existing inventory items")

        existing = {it.name.lower() for it in await store.find_all()}
        todo = [entry for entry in SEED_ITEMS if entry.name.lower() not in existing]

        if dry_run:
            print(f"[seed_inventory_items] DRY RUN: would create {len(todo)} items")
            return

        for entry in todo:
            view = await service.create_item(entry)
            flags = []
            if view["out_of_stock"]:
                flags.append("out of stock")
            elif view["low_stock"]:
                flags.append("low stock")
            suffix = f" ({', '.join(flags)})" if flags else ""
            print(f"[seed_inventory_items] {view['category']}: {view['name']} x{view['quantity']}{suffix}")

        total = await service.count_items()
        print(f"[seed_inventory_items] Created {len(todo)} items, {total} in inventory")


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--reset", action="store_true", help="Delete all inventory items before seeding")
    p.add_argument("--dry-run", action="store_true", help="Do not write, just print what would change")
    args = p.parse_args()

    asyncio.run(seed(reset=args.reset, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
