"""Warehouse state: inbound items, expiring items and uploads."""

from typing import List

from .base import CachedService
from ..api.warehouse_api import WarehouseAPI
from ..models.warehouse import MoveResult, Upload, WarehouseItem, WarehouseItemStatus

ITEMS_KEY = "warehouse.items"
EXPIRING_KEY = "warehouse.expiring"


class WarehouseService(CachedService):
    """Cached view of the warehouse plus the moves and write-offs on it."""

    def __init__(self, api: WarehouseAPI, cache, scheduler):
        super().__init__(cache, scheduler)
        self.api = api
        self.uploads: List[Upload] = []

    @property
    def items(self) -> List[WarehouseItem]:
        return self.cache.peek(ITEMS_KEY, [])

    @property
    def expiring_items(self) -> List[WarehouseItem]:
        return self.cache.peek(EXPIRING_KEY, [])

    def fetch_items(self, force: bool = False) -> List[WarehouseItem]:
        return self._fetch(ITEMS_KEY, self.api.get_items, force=force, default=[])

    def fetch_expiring_items(self, force: bool = False) -> List[WarehouseItem]:
        return self._fetch(
            EXPIRING_KEY,
            lambda: self.api.get_items(expire_soon=True),
            force=force,
            default=[]
        )

    def upload_file(self, path: str) -> Upload:
        """Import a delivery file, then reload the warehouse items."""
        upload = self._mutate("Upload", lambda: self.api.upload_file(path))
        self.logger.info(f"Uploaded {upload.file_name}: {upload.rows_imported} rows")

        self.fetch_items(force=True)
        self.uploads = [*self.uploads, upload]
        self.cache.invalidate(EXPIRING_KEY, "dashboard.stats")
        return upload

    def move_to_store(self, item_sid: str, quantity: int, price: float) -> MoveResult:
        """
        Move ``quantity`` units of a warehouse item onto the store floor.

        The cached item is decremented locally; moving everything leaves it
        at quantity 0 with status ``moved``.
        """
        _require_positive(quantity)
        result = self._mutate(
            "Move to store", lambda: self.api.move_to_store(item_sid, quantity, price)
        )
        self._take(item_sid, quantity, WarehouseItemStatus.MOVED)
        self.cache.invalidate("store.active", "dashboard.stats")
        return result

    def move_to_store_by_barcode(self, barcode: str, quantity: int, price: float) -> MoveResult:
        """Move by scanned barcode; the affected item is unknown locally, so reload."""
        _require_positive(quantity)
        result = self._mutate(
            "Move to store by barcode",
            lambda: self.api.move_to_store_by_barcode(barcode, quantity, price)
        )
        self.fetch_items(force=True)
        self.cache.invalidate(EXPIRING_KEY, "store.active", "dashboard.stats")
        return result

    def partial_delete_item(self, item_sid: str, quantity: int):
        """Write off ``quantity`` units; writing off everything marks the item discarded."""
        _require_positive(quantity)
        self._mutate("Delete item", lambda: self.api.delete_item(item_sid, quantity))
        self._take(item_sid, quantity, WarehouseItemStatus.DISCARDED)
        self.cache.invalidate("dashboard.stats")

    def _take(self, item_sid: str, quantity: int, exhausted_status: WarehouseItemStatus):
        def transform(items):
            return [
                item.take(quantity, exhausted_status) if item.sid == item_sid else item
                for item in items
            ]

        self._patch_list(ITEMS_KEY, transform)
        self._patch_list(EXPIRING_KEY, transform)


def _require_positive(quantity: int):
    if quantity < 1:
        raise ValueError("Quantity must be at least 1")
