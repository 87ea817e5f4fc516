import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from .database import Base


class InventoryItem(Base):
    """Inventory item row - one stock-keeping unit per id"""
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_items_quantity_non_negative"),
        CheckConstraint("price >= 0", name="ck_inventory_items_price_non_negative"),
        CheckConstraint("minimum_stock_level >= 0", name="ck_inventory_items_min_level_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False, index=True)

    quantity = Column(Integer, nullable=False, default=0)
    price = Column(Numeric, nullable=False)
    minimum_stock_level = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
