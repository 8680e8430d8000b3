"""Store floor state: active, expired and removed items, and sales reports."""

from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from .base import CachedService
from ..api.store_api import StoreAPI
from ..models.store import Discount, RemovedItem, Sale, StoreItem, StoreReports
from ..utils.formatting import calculate_discount_price

ACTIVE_KEY = "store.active"
EXPIRED_KEY = "store.expired"
REMOVED_KEY = "store.removed"
REPORTS_KEY = "store.reports"


class StoreService(CachedService):
    """Cached view of the store floor plus sales, discounts and write-offs."""

    def __init__(self, api: StoreAPI, cache, scheduler):
        super().__init__(cache, scheduler)
        self.api = api

    @property
    def active_items(self) -> List[StoreItem]:
        return self.cache.peek(ACTIVE_KEY, [])

    @property
    def expired_items(self) -> List[StoreItem]:
        return self.cache.peek(EXPIRED_KEY, [])

    @property
    def removed_items(self) -> List[RemovedItem]:
        return self.cache.peek(REMOVED_KEY, [])

    @property
    def reports(self) -> Optional[StoreReports]:
        return self.cache.peek(REPORTS_KEY)

    # ------------------------------------------------------------------
    # Freshness-gated fetches
    # ------------------------------------------------------------------

    def fetch_active_items(self, force: bool = False) -> List[StoreItem]:
        return self._fetch(
            ACTIVE_KEY, lambda: self.api.get_items("active"), force=force, default=[]
        )

    def fetch_expired_items(self, force: bool = False) -> List[StoreItem]:
        return self._fetch(
            EXPIRED_KEY, lambda: self.api.get_items("expired"), force=force, default=[]
        )

    def fetch_removed_items(self, force: bool = False) -> List[RemovedItem]:
        return self._fetch(
            REMOVED_KEY, self.api.get_removed_items, force=force, default=[]
        )

    def fetch_reports(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        force: bool = False
    ) -> Optional[StoreReports]:
        """
        Fetch the sales report.

        A date-filtered report always goes to the backend and is cached
        under its own key so it never shadows the default report.
        """
        if start_date or end_date:
            key = f"{REPORTS_KEY}:{_iso(start_date)}:{_iso(end_date)}"
            return self._fetch(
                key, lambda: self.api.get_reports(start_date, end_date), force=True
            )
        return self._fetch(REPORTS_KEY, self.api.get_reports, force=force)

    # ------------------------------------------------------------------
    # Mutations with optimistic patches
    # ------------------------------------------------------------------

    def record_sale(self, store_item_sid: str, sold_qty: int, sold_price: float) -> Sale:
        """
        Record a sale and decrement the cached active item.

        An item whose remaining quantity drops to 0 or below is removed
        from the active list. Active items and reports are re-fetched in
        the background shortly after.
        """
        if sold_qty < 1:
            raise ValueError("Quantity must be at least 1")

        sale = self._mutate(
            "Record sale",
            lambda: self.api.record_sale(store_item_sid, sold_qty, sold_price)
        )

        def transform(items):
            patched = []
            for item in items:
                if item.sid == store_item_sid:
                    if item.quantity - sold_qty <= 0:
                        continue
                    item = _with_quantity(item, item.quantity - sold_qty)
                patched.append(item)
            return patched

        self._patch_list(ACTIVE_KEY, transform)
        self.cache.invalidate("dashboard.stats")
        self._refresh_later(ACTIVE_KEY, self.fetch_active_items)
        self._refresh_later(REPORTS_KEY, self.fetch_reports)
        return sale

    def sell_by_barcode(self, barcode: str, quantity: int, price: Optional[float] = None) -> Sale:
        """
        Sell a scanned item from the active list.

        Without an explicit ``price`` the shelf price less the best current
        discount is charged.
        """
        item = self.find_by_barcode(barcode)
        if item is None:
            self.error = f"No active store item with barcode {barcode}"
            raise LookupError(self.error)
        if quantity > item.quantity:
            self.error = f"Only {item.quantity} units of {barcode} on the floor"
            raise ValueError(self.error)

        if price is None:
            price = calculate_discount_price(item.price, item.best_discount)
        return self.record_sale(item.sid, quantity, price)

    def find_by_barcode(self, barcode: str) -> Optional[StoreItem]:
        for item in self.fetch_active_items():
            if item.barcode == barcode:
                return item
        return None

    def create_discount(
        self,
        store_item_sid: str,
        percentage: float,
        starts_at: datetime,
        ends_at: datetime
    ) -> Discount:
        """Create a discount and append it to the cached item's discounts."""
        if not 0 < percentage <= 100:
            raise ValueError("Discount percentage must be between 0 and 100")
        if ends_at <= starts_at:
            raise ValueError("Discount must end after it starts")

        discount = self._mutate(
            "Create discount",
            lambda: self.api.create_discount(store_item_sid, percentage, starts_at, ends_at)
        )
        self._patch_list(ACTIVE_KEY, lambda items: [
            item.with_discount(discount) if item.sid == store_item_sid else item
            for item in items
        ])
        self._refresh_later(ACTIVE_KEY, self.fetch_active_items)
        return discount

    def mark_as_expired(self, store_item_sid: str) -> StoreItem:
        """Move an item from the active list to the expired list (server copy)."""
        updated = self._mutate(
            "Mark as expired", lambda: self.api.mark_as_expired(store_item_sid)
        )
        self._patch_list(ACTIVE_KEY, lambda items: _without(items, store_item_sid))
        if self.cache.peek(EXPIRED_KEY) is None:
            self.cache.patch(EXPIRED_KEY, [updated])
        else:
            self._patch_list(EXPIRED_KEY, lambda items: [*_without(items, store_item_sid), updated])
        return updated

    def remove_from_store(self, store_item_sid: str):
        """Take an item off the floor; it disappears from active and expired lists."""
        self._mutate("Remove from store", lambda: self.api.remove_from_store(store_item_sid))
        self._patch_list(ACTIVE_KEY, lambda items: _without(items, store_item_sid))
        self._patch_list(EXPIRED_KEY, lambda items: _without(items, store_item_sid))
        self.cache.invalidate(REMOVED_KEY, "dashboard.stats")
        self._refresh_later(ACTIVE_KEY, self.fetch_active_items)
        self._refresh_later(EXPIRED_KEY, self.fetch_expired_items)


def _without(items: List[StoreItem], store_item_sid: str) -> List[StoreItem]:
    return [item for item in items if item.sid != store_item_sid]


def _with_quantity(item: StoreItem, quantity: int) -> StoreItem:
    return replace(item, quantity=quantity)


def _iso(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""
