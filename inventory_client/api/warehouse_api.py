"""Warehouse endpoints."""

from pathlib import Path
from typing import List

from .api_client import ApiClient
from ..models.warehouse import WarehouseItem, Upload, MoveResult


class WarehouseAPI:
    """``/warehouse/*`` endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    def get_items(self, expire_soon: bool = False) -> List[WarehouseItem]:
        params = {"expire_soon": "true"} if expire_soon else {}
        data = self.client.request_json(
            "GET", "/warehouse/items", "Failed to fetch warehouse items", params=params
        )
        return [WarehouseItem.from_dict(item) for item in data or []]

    def upload_file(self, path: str) -> Upload:
        """Upload a delivery spreadsheet as ``multipart/form-data``."""
        file_path = Path(path)
        with open(file_path, "rb") as f:
            data = self.client.request_json(
                "POST", "/warehouse/upload", "Failed to upload file",
                files={"file": (file_path.name, f)}
            )
        return Upload.from_dict(data)

    def move_to_store(self, item_sid: str, quantity: int, price: float) -> MoveResult:
        data = self.client.request_json(
            "POST", "/warehouse/to-store", "Failed to move item to store",
            data={"item_sid": item_sid, "quantity": str(quantity), "price": str(price)}
        )
        return MoveResult.from_dict(data)

    def move_to_store_by_barcode(self, barcode: str, quantity: int, price: float) -> MoveResult:
        data = self.client.request_json(
            "POST", "/warehouse/to-store-by-barcode", "Failed to move item to store by barcode",
            data={"barcode": barcode, "quantity": str(quantity), "price": str(price)}
        )
        return MoveResult.from_dict(data)

    def delete_item(self, item_sid: str, quantity: int):
        """Write off ``quantity`` units of a warehouse item."""
        return self.client.request_json(
            "DELETE", "/warehouse/items", "Failed to delete warehouse item",
            params={"item_sid": item_sid, "quantity": quantity}
        )
