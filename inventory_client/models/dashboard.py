"""Dashboard summary model."""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, Any, Iterable, Optional

from .store import StoreItem, StoreReports
from .warehouse import WarehouseItem
from ..utils.formatting import parse_datetime


@dataclass
class DashboardStats:
    """Headline numbers for the landing page. All zero until fetched."""

    total_products: int = 0
    products_in_warehouse: int = 0
    products_in_store: int = 0
    products_expiring_soon: int = 0
    total_revenue_last_30_days: float = 0.0
    total_sales_last_30_days: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def compute(
        cls,
        warehouse_items: Iterable[WarehouseItem],
        store_items: Iterable[StoreItem],
        reports: Optional[StoreReports],
        now: Optional[datetime] = None,
        expiring_days: int = 7
    ) -> "DashboardStats":
        """
        Derive the dashboard numbers from the three backend views.

        An item counts as expiring soon when its expiry date lies within
        ``expiring_days`` from ``now`` (inclusive on both ends).
        """
        warehouse_items = list(warehouse_items)
        store_items = list(store_items)

        product_sids = {item.product_sid for item in warehouse_items}
        product_sids.update(item.product.sid for item in store_items if item.product)

        expiring = sum(
            1 for item in [*warehouse_items, *store_items]
            if _expires_within(item.expire_date, now, expiring_days)
        )

        summary = reports.summary if reports else None
        return cls(
            total_products=len(product_sids),
            products_in_warehouse=len(warehouse_items),
            products_in_store=len(store_items),
            products_expiring_soon=expiring,
            total_revenue_last_30_days=summary.total_sales if summary else 0.0,
            total_sales_last_30_days=summary.total_items_sold if summary else 0
        )


def _expires_within(expire_date: Optional[str], now: Optional[datetime], days: int) -> bool:
    if not expire_date:
        return False
    moment = parse_datetime(expire_date)
    if now is None:
        now = datetime.now(moment.tzinfo)
    delta = moment - now
    return 0 <= delta.total_seconds() <= days * 86400
