"""Store floor, point-of-sale and report data models."""

from dataclasses import dataclass, asdict, field, replace
from enum import Enum
from typing import Optional, Dict, Any, List

from .product import Product, optional_product


class StoreItemStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    REMOVED = "removed"


@dataclass
class Discount:
    """A time-boxed percentage discount on a store item."""

    sid: str
    store_item_sid: str
    percentage: float
    starts_at: Optional[str] = None
    ends_at: Optional[str] = None
    created_by_sid: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.percentage <= 100:
            raise ValueError("Discount percentage must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Discount":
        return cls(
            sid=data["sid"],
            store_item_sid=data.get("store_item_sid", ""),
            percentage=data.get("percentage", 0),
            starts_at=data.get("starts_at"),
            ends_at=data.get("ends_at"),
            created_by_sid=data.get("created_by_sid")
        )


@dataclass
class StoreItem:
    """Inventory unit on the sales floor, eligible for discount and sale."""

    sid: str
    quantity: int
    price: float
    status: StoreItemStatus = StoreItemStatus.ACTIVE
    warehouse_item_sid: Optional[str] = None
    moved_at: Optional[str] = None
    product: Optional[Product] = None
    expire_date: Optional[str] = None
    current_discounts: List[Discount] = field(default_factory=list)
    batch_code: Optional[str] = None
    days_until_expiry: Optional[int] = None

    def __post_init__(self):
        """Validate and normalize data."""
        if not self.sid:
            raise ValueError("Store item sid cannot be empty")

        if self.quantity < 0:
            raise ValueError("Quantity cannot be negative")

        self.status = StoreItemStatus(self.status)

    @property
    def barcode(self) -> Optional[str]:
        return self.product.barcode if self.product else None

    @property
    def best_discount(self) -> float:
        """Highest active discount percentage, 0 when none."""
        return max((d.percentage for d in self.current_discounts), default=0)

    def with_discount(self, discount: Discount) -> "StoreItem":
        return replace(self, current_discounts=[*self.current_discounts, discount])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return asdict(self)

    @classmethod
    def _fields_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return dict(
            sid=data["sid"],
            quantity=data.get("quantity", 0),
            price=data.get("price", 0.0),
            status=data.get("status", StoreItemStatus.ACTIVE),
            warehouse_item_sid=data.get("warehouse_item_sid"),
            moved_at=data.get("moved_at"),
            product=optional_product(data.get("product")),
            expire_date=data.get("expire_date"),
            current_discounts=[
                Discount.from_dict(d) for d in data.get("current_discounts") or []
            ],
            batch_code=data.get("batch_code"),
            days_until_expiry=data.get("days_until_expiry")
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreItem":
        """Create instance from dictionary."""
        return cls(**cls._fields_from_dict(data))


@dataclass
class RemovedItem(StoreItem):
    """A store item taken off the floor, with the value written off."""

    removed_at: Optional[str] = None
    lost_value: float = 0.0
    removal_reason: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemovedItem":
        fields = cls._fields_from_dict(data)
        if "status" not in data:
            fields["status"] = StoreItemStatus.REMOVED
        return cls(
            **fields,
            removed_at=data.get("removed_at"),
            lost_value=data.get("lost_value", 0.0),
            removal_reason=data.get("removal_reason", "")
        )


@dataclass
class Sale:
    """A recorded point-of-sale transaction."""

    sid: str
    store_item_sid: str
    sold_qty: int
    sold_price: float
    sold_at: Optional[str] = None
    cashier_sid: Optional[str] = None
    product: Optional[Product] = None
    total_amount: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sale":
        return cls(
            sid=data["sid"],
            store_item_sid=data.get("store_item_sid", ""),
            sold_qty=data.get("sold_qty", 0),
            sold_price=data.get("sold_price", 0.0),
            sold_at=data.get("sold_at"),
            cashier_sid=data.get("cashier_sid"),
            product=optional_product(data.get("product")),
            total_amount=data.get("total_amount")
        )


@dataclass
class CartItem:
    """A store item reserved in the point-of-sale cart."""

    sid: str
    store_item_sid: str
    quantity: int
    price_per_unit: float
    total_price: Optional[float] = None
    product: Optional[Product] = None
    expire_date: Optional[str] = None

    @property
    def line_total(self) -> float:
        """Display-only line total."""
        return self.quantity * self.price_per_unit

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartItem":
        return cls(
            sid=data["sid"],
            store_item_sid=data.get("store_item_sid", ""),
            quantity=data.get("quantity", 0),
            price_per_unit=data.get("price_per_unit", 0.0),
            total_price=data.get("total_price"),
            product=optional_product(data.get("product")),
            expire_date=data.get("expire_date")
        )


@dataclass
class CheckoutResult:
    """Backend summary of a cart checkout."""

    items_count: int
    total_amount: float
    sales: List[Sale] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckoutResult":
        return cls(
            items_count=data.get("items_count", 0),
            total_amount=data.get("total_amount", 0.0),
            sales=[Sale.from_dict(s) for s in data.get("sales") or []]
        )


@dataclass
class ReportSummary:
    total_sales: float = 0.0
    total_items_sold: int = 0
    total_removed_value: float = 0.0
    total_removed_items: int = 0
    total_discount_savings: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportSummary":
        return cls(
            total_sales=data.get("total_sales", 0.0),
            total_items_sold=data.get("total_items_sold", 0),
            total_removed_value=data.get("total_removed_value", 0.0),
            total_removed_items=data.get("total_removed_items", 0),
            total_discount_savings=data.get("total_discount_savings", 0.0)
        )


@dataclass
class StoreReports:
    """Sales, discount and write-off report for a period.

    Row lists are kept as the backend sends them; only the summary is typed.
    """

    summary: ReportSummary = field(default_factory=ReportSummary)
    period: Dict[str, Any] = field(default_factory=dict)
    sales: List[Dict[str, Any]] = field(default_factory=list)
    discounts: List[Dict[str, Any]] = field(default_factory=list)
    removed: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreReports":
        return cls(
            summary=ReportSummary.from_dict(data.get("summary") or {}),
            period=data.get("period") or {},
            sales=data.get("sales") or [],
            discounts=data.get("discounts") or [],
            removed=data.get("removed") or []
        )
