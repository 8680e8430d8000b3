"""Point-of-sale cart state."""

from typing import List

from .base import CachedService
from .store_service import StoreService
from ..api.store_api import StoreAPI
from ..models.store import CartItem, CheckoutResult

CART_KEY = "store.cart"


class CartService(CachedService):
    """Cached cart; totals here are for display, the backend prices the checkout."""

    def __init__(self, api: StoreAPI, store: StoreService, cache, scheduler):
        super().__init__(cache, scheduler)
        self.api = api
        self.store = store

    @property
    def items(self) -> List[CartItem]:
        return self.cache.peek(CART_KEY, [])

    @property
    def total_amount(self) -> float:
        return sum(item.line_total for item in self.items)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def fetch_cart(self, force: bool = False) -> List[CartItem]:
        return self._fetch(CART_KEY, self.api.get_cart, force=force, default=[])

    def add_to_cart(self, store_item_sid: str, quantity: int) -> List[CartItem]:
        """Add an item; the backend answers with the whole cart, which replaces ours."""
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")
        cart = self._mutate(
            "Add to cart", lambda: self.api.add_to_cart(store_item_sid, quantity)
        )
        self.cache.set(CART_KEY, cart)
        return cart

    def remove_from_cart(self, cart_item_sid: str):
        self._mutate("Remove from cart", lambda: self.api.remove_from_cart(cart_item_sid))
        self._patch_list(CART_KEY, lambda items: [i for i in items if i.sid != cart_item_sid])

    def checkout_cart(self) -> CheckoutResult:
        """Sell everything in the cart; the store views are re-fetched afterwards."""
        if not self.items:
            raise ValueError("Cart is empty")

        result = self._mutate("Checkout", self.api.checkout_cart)
        self.cache.set(CART_KEY, [])
        self.cache.invalidate("dashboard.stats")
        self._refresh_later("store.active", self.store.fetch_active_items)
        self._refresh_later("store.reports", self.store.fetch_reports)
        self.logger.info(
            f"Checkout: {result.items_count} items for {result.total_amount:.2f}"
        )
        return result
