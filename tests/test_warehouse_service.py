"""Tests for the warehouse service."""

import pytest

from inventory_client.models.warehouse import WarehouseItemStatus
from inventory_client.utils.exceptions import ApiError

from conftest import store_item_json, warehouse_item_json


@pytest.fixture
def warehouse(service, backend):
    backend.on("GET", "/warehouse/items", body=[
        warehouse_item_json(sid="w-1", quantity=50),
        warehouse_item_json(sid="w-2", quantity=5, product_sid="p-2"),
    ])
    return service.warehouse


class TestFetch:

    def test_items_cached_within_window(self, warehouse, backend):
        warehouse.fetch_items()
        warehouse.fetch_items()

        assert len(backend.calls("GET", "/warehouse/items")) == 1

    def test_expiring_items_use_own_key(self, warehouse, backend):
        warehouse.fetch_items()
        warehouse.fetch_expiring_items()

        calls = backend.calls("GET", "/warehouse/items")
        assert len(calls) == 2
        assert "expire_soon" not in calls[0].url.params
        assert calls[1].url.params["expire_soon"] == "true"


class TestMoveToStore:

    def test_partial_move_decrements(self, warehouse, backend):
        warehouse.fetch_items()
        backend.on("POST", "/warehouse/to-store", body={"store_item_sid": "s-1"})

        result = warehouse.move_to_store("w-1", 20, 2.5)

        assert result.store_item_sid == "s-1"
        item = warehouse.items[0]
        assert item.quantity == 30
        assert item.status == WarehouseItemStatus.IN_STOCK

    def test_full_move_marks_moved(self, warehouse, backend):
        warehouse.fetch_items()
        warehouse.fetch_expiring_items()
        backend.on("POST", "/warehouse/to-store", body={"store_item_sid": "s-1"})

        warehouse.move_to_store("w-2", 5, 2.5)

        for items in (warehouse.items, warehouse.expiring_items):
            moved = next(i for i in items if i.sid == "w-2")
            assert moved.quantity == 0
            assert moved.status == WarehouseItemStatus.MOVED

    def test_move_makes_store_view_stale(self, service, warehouse, backend):
        backend.on("GET", "/store/items", body=[store_item_json()])
        service.store.fetch_active_items()
        backend.on("POST", "/warehouse/to-store", body={"store_item_sid": "s-1"})

        warehouse.move_to_store("w-1", 1, 2.5)
        service.store.fetch_active_items()

        assert len(backend.calls("GET", "/store/items")) == 2

    def test_failed_move_keeps_items(self, warehouse, backend):
        warehouse.fetch_items()
        backend.on("POST", "/warehouse/to-store", status=400, body={"detail": "Item already moved"})

        with pytest.raises(ApiError):
            warehouse.move_to_store("w-1", 10, 2.5)

        assert warehouse.error == "Item already moved"
        assert warehouse.items[0].quantity == 50

    def test_move_by_barcode_reloads(self, warehouse, backend):
        warehouse.fetch_items()
        backend.on("POST", "/warehouse/to-store-by-barcode", body={"store_item_sid": "s-1"})

        warehouse.move_to_store_by_barcode("4600000000001", 5, 2.5)

        assert len(backend.calls("GET", "/warehouse/items")) == 2

    def test_quantity_must_be_positive(self, warehouse):
        with pytest.raises(ValueError):
            warehouse.move_to_store("w-1", 0, 2.5)


class TestPartialDelete:

    def test_partial_write_off(self, warehouse, backend):
        warehouse.fetch_items()
        backend.on("DELETE", "/warehouse/items", status=204)

        warehouse.partial_delete_item("w-1", 10)

        assert warehouse.items[0].quantity == 40

    def test_full_write_off_marks_discarded(self, warehouse, backend):
        warehouse.fetch_items()
        backend.on("DELETE", "/warehouse/items", status=204)

        warehouse.partial_delete_item("w-2", 5)

        item = warehouse.items[1]
        assert item.quantity == 0
        assert item.status == WarehouseItemStatus.DISCARDED


class TestUpload:

    def test_upload_reloads_items(self, warehouse, backend, tmp_path):
        delivery = tmp_path / "delivery.xlsx"
        delivery.write_bytes(b"rows")
        backend.on("POST", "/warehouse/upload", body={
            "sid": "u-2", "file_name": "delivery.xlsx", "rows_imported": 12
        })

        upload = warehouse.upload_file(str(delivery))

        assert upload.rows_imported == 12
        assert warehouse.uploads == [upload]
        assert len(backend.calls("GET", "/warehouse/items")) == 1
        assert b"delivery.xlsx" in backend.calls("POST", "/warehouse/upload")[0].content

    def test_failed_upload_raises(self, warehouse, backend, tmp_path):
        delivery = tmp_path / "delivery.xlsx"
        delivery.write_bytes(b"rows")
        backend.on("POST", "/warehouse/upload", status=422, body={"detail": "Unsupported format"})

        with pytest.raises(ApiError, match="Unsupported format"):
            warehouse.upload_file(str(delivery))

        assert warehouse.uploads == []


class TestFailedWriteOff:

    def test_failed_partial_delete_keeps_items(self, warehouse, backend):
        warehouse.fetch_items()
        backend.on("DELETE", "/warehouse/items", status=400, body={"detail": "Quantity exceeds stock"})

        with pytest.raises(ApiError, match="Quantity exceeds stock"):
            warehouse.partial_delete_item("w-2", 5)

        assert warehouse.error == "Quantity exceeds stock"
        item = warehouse.items[1]
        assert item.quantity == 5
        assert item.status == WarehouseItemStatus.IN_STOCK

    def test_malformed_item_does_not_raise(self, service, backend):
        backend.on("GET", "/warehouse/items", body=[warehouse_item_json(quantity=-1)])

        assert service.warehouse.fetch_items() == []
        assert service.warehouse.error == "Unexpected response for warehouse.items"
