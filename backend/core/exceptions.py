"""
Domain exceptions for the inventory service.

Every error raised by the inventory core derives from InventoryError. The
transport renders them through to_dict() with the class' status_code, so
adding a new error kind never requires touching the router.
"""

from typing import Any, Dict, Optional


class InventoryError(Exception):
    """Base exception for all inventory errors."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.replace("Error", "").lower()
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result = {
            "detail": self.message,
            "code": self.code,
            "type": self.__class__.__name__,
        }
        if self.details:
            result["details"] = self.details
        return result


class InventoryValidationError(InventoryError):
    """Raised when an input field is missing or out of range."""

    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"{field}: {message}",
            code="validation_error",
            details={"field": field},
        )
        self.field = field


class InvalidArgumentError(InventoryError):
    """Raised when a stock amount passed to add/reduce is negative."""

    status_code = 400

    def __init__(self, argument: str, value: Any, message: str):
        super().__init__(
            message=message,
            code="invalid_argument",
            details={"argument": argument, "value": value},
        )
        self.argument = argument
        self.value = value


class ItemNotFoundError(InventoryError):
    """Raised when the referenced inventory item does not exist."""

    status_code = 404

    def __init__(self, item_id: str):
        super().__init__(
            message=f"Inventory item with id {item_id} not found",
            code="not_found",
            details={"item_id": item_id},
        )
        self.item_id = item_id


class InsufficientStockError(InventoryError):
    """Raised when a reduction asks for more units than are on hand."""

    status_code = 409

    def __init__(self, item_id: str, requested: int, available: int):
        super().__init__(
            message=(
                f"Insufficient stock for item {item_id}. "
                f"Requested: {requested}, Available: {available}"
            ),
            code="insufficient_stock",
            details={"item_id": item_id, "requested": requested, "available": available},
        )
        self.item_id = item_id
        self.requested = requested
        self.available = available
