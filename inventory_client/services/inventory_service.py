"""Main entry point wiring the API client, cache, scheduler and domain services."""

from typing import Callable, Optional

import httpx

from .auth_service import AuthService
from .cart_service import CartService
from .dashboard_service import DashboardService
from .prediction_service import PredictionService
from .store_service import StoreService
from .warehouse_service import WarehouseService
from ..api.api_client import ApiClient
from ..api.auth_api import AuthAPI
from ..api.prediction_api import PredictionAPI
from ..api.store_api import StoreAPI
from ..api.token_store import FileTokenStore
from ..api.warehouse_api import WarehouseAPI
from ..cache.freshness import FreshnessCache
from ..scheduler import RefreshScheduler
from ..utils.config import get_config
from ..utils.logger import get_session_logger


class InventoryService:
    """
    One session against the inventory backend.

    All domain services share a single ``FreshnessCache`` so a mutation in
    one domain can invalidate another domain's views (a warehouse move
    makes the store's active list stale, for example).

    Args:
        token_store: Where the bearer token lives (default: the configured token file)
        on_unauthorized: Called with the login path after a 401 cleared the session
        transport: Optional httpx transport, for tests
        scheduler: Background re-fetch scheduler (default: ``RefreshScheduler``)
        clock: Time source for the cache, seconds
    """

    def __init__(
        self,
        token_store=None,
        on_unauthorized: Optional[Callable[[str], None]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        scheduler=None,
        clock: Optional[Callable[[], float]] = None,
        base_url: Optional[str] = None
    ):
        self.config = get_config()
        self.logger = get_session_logger()
        self.token_store = token_store or FileTokenStore(self.config.env.token_file)
        self._on_unauthorized = on_unauthorized

        cache_kwargs = {"clock": clock} if clock else {}
        self.cache = FreshnessCache(self.config.cache.window_for, **cache_kwargs)
        self.scheduler = scheduler or RefreshScheduler()

        self.client = ApiClient(
            self.token_store,
            base_url=base_url,
            on_unauthorized=self._session_expired,
            transport=transport
        )

        warehouse_api = WarehouseAPI(self.client)
        store_api = StoreAPI(self.client)

        self.auth = AuthService(AuthAPI(self.client), self.token_store, on_logout=self.cache.clear)
        self.warehouse = WarehouseService(warehouse_api, self.cache, self.scheduler)
        self.store = StoreService(store_api, self.cache, self.scheduler)
        self.cart = CartService(store_api, self.store, self.cache, self.scheduler)
        self.prediction = PredictionService(PredictionAPI(self.client), self.cache, self.scheduler)
        self.dashboard = DashboardService(warehouse_api, store_api, self.cache, self.scheduler)

    def _session_expired(self, login_path: str):
        """401 anywhere: drop the session and everything cached under it."""
        self.auth.check_auth()
        self.cache.clear()
        self.logger.info(f"Session expired, login required at {login_path}")
        if self._on_unauthorized:
            self._on_unauthorized(login_path)

    def refresh_all(self):
        """Force-refresh the main views (used by the periodic refresh job)."""
        self.warehouse.fetch_items(force=True)
        self.store.fetch_active_items(force=True)
        self.store.fetch_reports(force=True)
        self.dashboard.fetch_stats(force=True)

    def close(self):
        self.scheduler.shutdown()
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
