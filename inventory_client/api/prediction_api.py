"""Demand forecast endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .api_client import ApiClient
from ..models.prediction import Prediction, PredictionStats, TimeFrame
from ..models.product import Product, ProductCategory


class PredictionAPI:
    """``/prediction/*`` endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    def get_products(
        self,
        category_sid: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[Product]:
        params = {}
        if category_sid:
            params["category_sid"] = category_sid
        if search:
            params["search"] = search
        data = self.client.request_json(
            "GET", "/prediction/products", "Failed to fetch products", params=params
        )
        return [Product.from_dict(p) for p in data or []]

    def get_categories(self) -> List[ProductCategory]:
        data = self.client.request_json(
            "GET", "/prediction/categories", "Failed to fetch categories"
        )
        return [ProductCategory.from_dict(c) for c in data or []]

    def get_forecast(
        self,
        product_sid: str,
        refresh: bool = False,
        timeframe: TimeFrame = TimeFrame.MONTH,
        periods: int = 3
    ) -> List[Prediction]:
        params = {
            "refresh": "true" if refresh else "false",
            "timeframe": TimeFrame(timeframe).value,
            "periods": periods,
        }
        data = self.client.request_json(
            "GET", f"/prediction/forecast/{product_sid}", "Failed to fetch predictions",
            params=params
        )
        return [Prediction.from_dict(p) for p in data or []]

    def get_stats(
        self,
        product_sid: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> PredictionStats:
        params = {}
        if product_sid:
            params["product_sid"] = product_sid
        if start_date:
            params["start_date"] = start_date.isoformat()
        if end_date:
            params["end_date"] = end_date.isoformat()
        data = self.client.request_json(
            "GET", "/prediction/stats", "Failed to fetch prediction stats", params=params
        )
        return PredictionStats.from_dict(data or {})

    # Analytics payloads are chart-shaped and passed through untyped.

    def get_analytics(self, product_sid: str) -> Dict[str, Any]:
        return self.client.request_json(
            "GET", f"/prediction/analytics/{product_sid}", "Failed to fetch product analytics"
        ) or {}

    def get_trends(self, product_sid: str) -> Dict[str, Any]:
        return self.client.request_json(
            "GET", f"/prediction/trends/{product_sid}", "Failed to fetch sales trends"
        ) or {}

    def get_insights(self) -> Dict[str, Any]:
        return self.client.request_json(
            "GET", "/prediction/insights", "Failed to fetch insights"
        ) or {}
