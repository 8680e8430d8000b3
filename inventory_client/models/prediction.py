"""Demand forecast data models (all values computed server-side)."""

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Optional, Dict, Any, List

from .product import Product, ProductCategory, optional_product


class TimeFrame(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass
class Prediction:
    """One forecast point for a product."""

    sid: str
    product_sid: str
    timeframe: TimeFrame
    period_start: str
    period_end: str
    forecast_qty: float
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    generated_at: Optional[str] = None
    model_version: Optional[str] = None
    product: Optional[Product] = None

    def __post_init__(self):
        self.timeframe = TimeFrame(self.timeframe)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Prediction":
        return cls(
            sid=data.get("sid", ""),
            product_sid=data.get("product_sid", ""),
            timeframe=data.get("timeframe", TimeFrame.MONTH),
            period_start=data.get("period_start", ""),
            period_end=data.get("period_end", ""),
            forecast_qty=data.get("forecast_qty", 0),
            lower_bound=data.get("lower_bound"),
            upper_bound=data.get("upper_bound"),
            generated_at=data.get("generated_at"),
            model_version=data.get("model_version"),
            product=optional_product(data.get("product"))
        )


@dataclass
class PredictionStats:
    """Historical sales series used by the forecast charts."""

    dates: List[str] = field(default_factory=list)
    products: List[Dict[str, Any]] = field(default_factory=list)
    categories: List[ProductCategory] = field(default_factory=list)
    quantity_data: List[Dict[str, Any]] = field(default_factory=list)
    revenue_data: List[Dict[str, Any]] = field(default_factory=list)
    category_quantity_data: List[Dict[str, Any]] = field(default_factory=list)
    category_revenue_data: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PredictionStats":
        return cls(
            dates=data.get("dates") or [],
            products=data.get("products") or [],
            categories=[ProductCategory.from_dict(c) for c in data.get("categories") or []],
            quantity_data=data.get("quantity_data") or [],
            revenue_data=data.get("revenue_data") or [],
            category_quantity_data=data.get("category_quantity_data") or [],
            category_revenue_data=data.get("category_revenue_data") or []
        )
