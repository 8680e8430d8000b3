"""Forecast state: products, categories, per-product forecasts and analytics."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import CachedService
from ..api.prediction_api import PredictionAPI
from ..models.prediction import Prediction, PredictionStats, TimeFrame
from ..models.product import Product, ProductCategory

PRODUCTS_KEY = "prediction.products"
CATEGORIES_KEY = "prediction.categories"
STATS_KEY = "prediction.stats"
FORECAST_KEY = "prediction.forecast"
ANALYTICS_KEY = "prediction.analytics"
TRENDS_KEY = "prediction.trends"
INSIGHTS_KEY = "prediction.insights"


class PredictionService(CachedService):
    """
    Cached forecasts.

    Forecasts, analytics and trends are cached per product. Changing the
    selected timeframe or number of periods re-fetches the selected
    product's forecast right away.
    """

    def __init__(self, api: PredictionAPI, cache, scheduler):
        super().__init__(cache, scheduler)
        self.api = api
        self.selected_product_sid: Optional[str] = None
        self.selected_timeframe: TimeFrame = TimeFrame.MONTH
        self.selected_periods: int = 3

    @property
    def products(self) -> List[Product]:
        return self.cache.peek(PRODUCTS_KEY, [])

    @property
    def categories(self) -> List[ProductCategory]:
        return self.cache.peek(CATEGORIES_KEY, [])

    @property
    def stats(self) -> Optional[PredictionStats]:
        return self.cache.peek(STATS_KEY)

    def forecast(self, product_sid: str) -> List[Prediction]:
        return self.cache.peek(f"{FORECAST_KEY}:{product_sid}", [])

    def fetch_forecast(
        self,
        product_sid: str,
        refresh: bool = False,
        timeframe: Optional[TimeFrame] = None,
        periods: Optional[int] = None
    ) -> List[Prediction]:
        """``refresh`` bypasses the cache and asks the backend to recompute."""
        timeframe = timeframe or self.selected_timeframe
        periods = periods or self.selected_periods
        return self._fetch(
            f"{FORECAST_KEY}:{product_sid}",
            lambda: self.api.get_forecast(product_sid, refresh, timeframe, periods),
            force=refresh,
            default=[]
        )

    def fetch_stats(
        self,
        product_sid: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        force: bool = False
    ) -> Optional[PredictionStats]:
        if product_sid or start_date or end_date:
            key = ":".join([
                STATS_KEY,
                product_sid or "",
                start_date.isoformat() if start_date else "",
                end_date.isoformat() if end_date else "",
            ])
            return self._fetch(
                key, lambda: self.api.get_stats(product_sid, start_date, end_date), force=True
            )
        return self._fetch(STATS_KEY, self.api.get_stats, force=force)

    def fetch_products(
        self,
        category_sid: Optional[str] = None,
        search: Optional[str] = None,
        force: bool = False
    ) -> List[Product]:
        """A filtered product list always goes to the backend."""
        if category_sid or search:
            return self._fetch(
                f"{PRODUCTS_KEY}:{category_sid or ''}:{search or ''}",
                lambda: self.api.get_products(category_sid, search),
                force=True,
                default=[]
            )
        return self._fetch(PRODUCTS_KEY, self.api.get_products, force=force, default=[])

    def fetch_categories(self, force: bool = False) -> List[ProductCategory]:
        return self._fetch(CATEGORIES_KEY, self.api.get_categories, force=force, default=[])

    def fetch_analytics(self, product_sid: str, force: bool = False) -> Dict[str, Any]:
        return self._fetch(
            f"{ANALYTICS_KEY}:{product_sid}",
            lambda: self.api.get_analytics(product_sid),
            force=force,
            default={}
        )

    def fetch_trends(self, product_sid: str, force: bool = False) -> Dict[str, Any]:
        return self._fetch(
            f"{TRENDS_KEY}:{product_sid}",
            lambda: self.api.get_trends(product_sid),
            force=force,
            default={}
        )

    def fetch_insights(self, force: bool = False) -> Dict[str, Any]:
        return self._fetch(INSIGHTS_KEY, self.api.get_insights, force=force, default={})

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def set_selected_product(self, product_sid: Optional[str]):
        self.selected_product_sid = product_sid

    def set_selected_timeframe(self, timeframe: TimeFrame):
        self.selected_timeframe = TimeFrame(timeframe)
        if self.selected_product_sid:
            self.fetch_forecast(self.selected_product_sid, refresh=True)

    def set_selected_periods(self, periods: int):
        if periods < 1:
            raise ValueError("Periods must be at least 1")
        self.selected_periods = periods
        if self.selected_product_sid:
            self.fetch_forecast(self.selected_product_sid, refresh=True)
