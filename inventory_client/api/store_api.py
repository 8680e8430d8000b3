"""Store floor and point-of-sale endpoints."""

from datetime import datetime
from typing import List, Optional

from .api_client import ApiClient
from ..models.store import (
    CartItem,
    CheckoutResult,
    Discount,
    RemovedItem,
    Sale,
    StoreItem,
    StoreReports,
)


class StoreAPI:
    """``/store/*`` endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    def get_items(self, status: Optional[str] = None) -> List[StoreItem]:
        params = {"status": status} if status else {}
        data = self.client.request_json(
            "GET", "/store/items", f"Failed to fetch {status or 'store'} items", params=params
        )
        return [StoreItem.from_dict(item) for item in data or []]

    def get_removed_items(self) -> List[RemovedItem]:
        data = self.client.request_json(
            "GET", "/store/items", "Failed to fetch removed items", params={"status": "removed"}
        )
        return [RemovedItem.from_dict(item) for item in data or []]

    def create_discount(
        self,
        store_item_sid: str,
        percentage: float,
        starts_at: datetime,
        ends_at: datetime
    ) -> Discount:
        data = self.client.request_json(
            "POST", "/store/discount", "Failed to create discount",
            json={
                "store_item_sid": store_item_sid,
                "percentage": percentage,
                "starts_at": starts_at.isoformat(),
                "ends_at": ends_at.isoformat(),
            }
        )
        return Discount.from_dict(data)

    def mark_as_expired(self, store_item_sid: str) -> StoreItem:
        data = self.client.request_json(
            "POST", f"/store/expire/{store_item_sid}", "Failed to mark item as expired"
        )
        return StoreItem.from_dict(data)

    def remove_from_store(self, store_item_sid: str) -> Optional[StoreItem]:
        data = self.client.request_json(
            "POST", f"/store/remove/{store_item_sid}", "Failed to remove item from store"
        )
        return StoreItem.from_dict(data) if data else None

    def record_sale(self, store_item_sid: str, sold_qty: int, sold_price: float) -> Sale:
        data = self.client.request_json(
            "POST", "/store/sales", "Failed to record sale",
            json={
                "store_item_sid": store_item_sid,
                "sold_qty": sold_qty,
                "sold_price": sold_price,
            }
        )
        return Sale.from_dict(data)

    def get_reports(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> StoreReports:
        params = {}
        if start_date:
            params["start_date"] = start_date.isoformat()
        if end_date:
            params["end_date"] = end_date.isoformat()
        data = self.client.request_json(
            "GET", "/store/reports", "Failed to fetch store reports", params=params
        )
        return StoreReports.from_dict(data or {})

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    def get_cart(self) -> List[CartItem]:
        data = self.client.request_json("GET", "/store/cart", "Failed to fetch cart")
        return [CartItem.from_dict(item) for item in data or []]

    def add_to_cart(self, store_item_sid: str, quantity: int) -> List[CartItem]:
        data = self.client.request_json(
            "POST", "/store/cart", "Failed to add item to cart",
            json={"store_item_sid": store_item_sid, "quantity": quantity}
        )
        return [CartItem.from_dict(item) for item in data or []]

    def remove_from_cart(self, cart_item_sid: str):
        return self.client.request_json(
            "DELETE", f"/store/cart/{cart_item_sid}", "Failed to remove item from cart"
        )

    def checkout_cart(self) -> CheckoutResult:
        data = self.client.request_json("POST", "/store/cart/checkout", "Failed to checkout cart")
        return CheckoutResult.from_dict(data or {})
