"""Warehouse item and upload data models."""

from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Optional, Dict, Any

from .product import Product, optional_product


class WarehouseItemStatus(str, Enum):
    IN_STOCK = "in_stock"
    MOVED = "moved"
    DISCARDED = "discarded"


class UrgencyLevel(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"
    CRITICAL = "critical"


@dataclass
class WarehouseItem:
    """Inbound inventory unit with expiry tracking, not yet for sale."""

    sid: str
    product_sid: str
    quantity: int
    status: WarehouseItemStatus = WarehouseItemStatus.IN_STOCK
    upload_sid: Optional[str] = None
    batch_code: Optional[str] = None
    expire_date: Optional[str] = None
    received_at: Optional[str] = None
    product: Optional[Product] = None
    suggested_price: Optional[float] = None
    urgency_level: Optional[UrgencyLevel] = None

    def __post_init__(self):
        """Validate and normalize data."""
        if not self.sid:
            raise ValueError("Warehouse item sid cannot be empty")

        if self.quantity < 0:
            raise ValueError("Quantity cannot be negative")

        self.status = WarehouseItemStatus(self.status)
        if self.urgency_level is not None:
            self.urgency_level = UrgencyLevel(self.urgency_level)

    def take(self, quantity: int, exhausted_status: WarehouseItemStatus) -> "WarehouseItem":
        """
        Copy of this item with ``quantity`` units taken out.

        When nothing is left the copy keeps quantity 0 and switches to
        ``exhausted_status`` instead of going negative.
        """
        remaining = self.quantity - quantity
        if remaining <= 0:
            return replace(self, quantity=0, status=exhausted_status)
        return replace(self, quantity=remaining)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WarehouseItem":
        """Create instance from dictionary."""
        product = optional_product(data.get("product"))
        return cls(
            sid=data["sid"],
            product_sid=data.get("product_sid") or (product.sid if product else ""),
            quantity=data.get("quantity", 0),
            status=data.get("status", WarehouseItemStatus.IN_STOCK),
            upload_sid=data.get("upload_sid"),
            batch_code=data.get("batch_code"),
            expire_date=data.get("expire_date"),
            received_at=data.get("received_at"),
            product=product,
            suggested_price=data.get("suggested_price"),
            urgency_level=data.get("urgency_level")
        )


@dataclass
class Upload:
    """Result of importing a warehouse delivery file."""

    sid: str
    file_name: str
    uploaded_at: Optional[str] = None
    rows_imported: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Upload":
        return cls(
            sid=data["sid"],
            file_name=data.get("file_name", ""),
            uploaded_at=data.get("uploaded_at"),
            rows_imported=data.get("rows_imported", 0)
        )


@dataclass
class MoveResult:
    """Backend acknowledgement of a warehouse → store move."""

    store_item_sid: str
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoveResult":
        return cls(
            store_item_sid=data.get("store_item_sid", ""),
            message=data.get("message", "")
        )
