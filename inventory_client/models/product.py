"""Product and category data models."""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any


@dataclass
class ProductCategory:
    """A product category as returned by the backend."""

    sid: str
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductCategory":
        """Accepts both ``{sid, name}`` and the stats shape ``{category_sid, category_name}``."""
        return cls(
            sid=data.get("sid") or data.get("category_sid", ""),
            name=data.get("name") or data.get("category_name", "")
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Product:
    """Catalogue product referenced by warehouse and store items."""

    sid: str
    name: str
    category_sid: Optional[str] = None
    barcode: Optional[str] = None
    default_unit: Optional[str] = None
    default_price: Optional[float] = None
    currency: Optional[str] = None
    storage_duration: Optional[int] = None
    storage_duration_type: Optional[str] = None
    category: Optional[ProductCategory] = None

    def __post_init__(self):
        """Validate and normalize data."""
        if not self.sid:
            raise ValueError("Product sid cannot be empty")

    @property
    def category_name(self) -> str:
        return self.category.name if self.category else ""

    @property
    def unit(self) -> str:
        return self.default_unit or "pcs"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Create instance from dictionary."""
        category = data.get("category")
        return cls(
            sid=data["sid"],
            name=data.get("name", ""),
            category_sid=data.get("category_sid"),
            barcode=data.get("barcode"),
            default_unit=data.get("default_unit"),
            default_price=data.get("default_price"),
            currency=data.get("currency"),
            storage_duration=data.get("storage_duration"),
            storage_duration_type=data.get("storage_duration_type"),
            category=ProductCategory.from_dict(category) if category else None
        )


def optional_product(data: Optional[Dict[str, Any]]) -> Optional[Product]:
    """Parse an embedded product payload when the backend included one."""
    return Product.from_dict(data) if data else None
