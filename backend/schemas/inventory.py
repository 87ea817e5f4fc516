from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class InventoryItemCreate(BaseModel):
    name: str
    description: Optional[str] = None
    category: str
    quantity: int = Field(ge=0)
    price: Decimal = Field(ge=0)
    minimum_stock_level: Optional[int] = Field(default=None, ge=0)

    @field_validator("name", "category")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class InventoryItemUpdate(BaseModel):
    """Every field optional; only fields present in the request body are applied."""

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    price: Optional[Decimal] = Field(default=None, ge=0)
    minimum_stock_level: Optional[int] = Field(default=None, ge=0)

    @field_validator("name", "category")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v


class StockUpdateRequest(BaseModel):
    # Sign is checked by the service so a negative amount surfaces as invalid_argument
    quantity: int
    reason: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class InventoryItemRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: str
    quantity: int
    price: Decimal
    minimum_stock_level: int
    created_at: datetime
    updated_at: datetime
    low_stock: bool
    out_of_stock: bool


class AvailabilityRead(BaseModel):
    item_id: str
    quantity: int
    available: bool


class ItemCountRead(BaseModel):
    count: int
