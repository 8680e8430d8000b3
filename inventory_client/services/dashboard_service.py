"""Landing-page numbers aggregated from the warehouse, store and report views."""

from .base import CachedService
from ..api.store_api import StoreAPI
from ..api.warehouse_api import WarehouseAPI
from ..models.dashboard import DashboardStats

STATS_KEY = "dashboard.stats"


class DashboardService(CachedService):

    def __init__(self, warehouse_api: WarehouseAPI, store_api: StoreAPI, cache, scheduler):
        super().__init__(cache, scheduler)
        self.warehouse_api = warehouse_api
        self.store_api = store_api

    @property
    def stats(self) -> DashboardStats:
        return self.cache.peek(STATS_KEY, DashboardStats())

    def fetch_stats(self, force: bool = False) -> DashboardStats:
        """
        Compute the dashboard numbers from three backend calls.

        Any failing call fails the whole fetch: ``error`` is set and the
        previous numbers (all zero before the first success) are returned.
        """
        return self._fetch(STATS_KEY, self._load_stats, force=force, default=DashboardStats())

    def _load_stats(self) -> DashboardStats:
        warehouse_items = self.warehouse_api.get_items()
        store_items = self.store_api.get_items()
        reports = self.store_api.get_reports()
        return DashboardStats.compute(warehouse_items, store_items, reports)
