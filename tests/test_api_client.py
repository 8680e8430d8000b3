"""Tests for the authenticated API client and the endpoint wrappers."""

import pytest

from inventory_client.api.api_client import ApiClient
from inventory_client.api.store_api import StoreAPI
from inventory_client.api.token_store import FileTokenStore, MemoryTokenStore
from inventory_client.api.warehouse_api import WarehouseAPI
from inventory_client.utils.exceptions import (
    ApiError,
    SessionExpiredError,
    extract_detail_message,
)

from conftest import BASE_URL, store_item_json


@pytest.fixture
def client(backend, token_store, redirects):
    api_client = ApiClient(
        token_store,
        base_url=BASE_URL,
        on_unauthorized=redirects.append,
        transport=backend.transport()
    )
    yield api_client
    api_client.close()


class TestApiClient:

    def test_bearer_header(self, client, backend):
        backend.on("GET", "/store/items", body=[])

        client.request_json("GET", "/store/items", "Failed")

        assert backend.requests[0].headers["Authorization"] == "Bearer token-123"

    def test_no_header_without_token(self, client, backend, token_store):
        token_store.clear()
        backend.on("GET", "/store/items", body=[])

        client.request_json("GET", "/store/items", "Failed")

        assert "Authorization" not in backend.requests[0].headers

    def test_empty_body_returns_none(self, client, backend):
        backend.on("POST", "/auth/logout", status=204)

        assert client.request_json("POST", "/auth/logout", "Failed") is None

    def test_unauthorized_clears_token_and_redirects(self, client, backend, token_store, redirects):
        backend.on("GET", "/store/items", status=401, body={"detail": "Token expired"})

        with pytest.raises(SessionExpiredError) as exc_info:
            client.request_json("GET", "/store/items", "Failed")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Token expired"
        assert token_store.get() is None
        assert redirects == ["/auth/login"]

    def test_error_uses_string_detail(self, client, backend):
        backend.on("POST", "/store/sales", status=400, body={"detail": "Not enough stock"})

        with pytest.raises(ApiError) as exc_info:
            client.request_json("POST", "/store/sales", "Failed to record sale")

        assert exc_info.value.message == "Not enough stock"
        assert exc_info.value.status_code == 400

    def test_error_joins_validation_messages(self, client, backend):
        backend.on("POST", "/store/sales", status=422, body={"detail": [
            {"loc": ["body", "sold_qty"], "msg": "must be positive"},
            {"loc": ["body", "sold_price"], "msg": "field required"},
        ]})

        with pytest.raises(ApiError, match="must be positive; field required"):
            client.request_json("POST", "/store/sales", "Failed to record sale")

    def test_error_without_detail_uses_fallback(self, client, backend):
        backend.on("GET", "/store/reports", status=500)

        with pytest.raises(ApiError, match="Failed to fetch store reports"):
            client.request_json("GET", "/store/reports", "Failed to fetch store reports")

    def test_transport_error_becomes_api_error(self, token_store):
        import httpx

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        api_client = ApiClient(token_store, base_url=BASE_URL, transport=httpx.MockTransport(refuse))

        with pytest.raises(ApiError, match="Failed to fetch items"):
            api_client.request_json("GET", "/store/items", "Failed to fetch items")


class TestEndpoints:

    def test_store_items_status_param(self, client, backend):
        backend.on("GET", "/store/items", body=[store_item_json()])

        items = StoreAPI(client).get_items("expired")

        assert items[0].sid == "s-1"
        assert backend.requests[0].url.params["status"] == "expired"

    def test_move_to_store_sends_form_fields(self, client, backend):
        backend.on("POST", "/warehouse/to-store", body={"store_item_sid": "s-9"})

        result = WarehouseAPI(client).move_to_store("w-1", 5, 2.5)

        body = backend.requests[0].content.decode()
        assert "item_sid=w-1" in body
        assert "quantity=5" in body
        assert "price=2.5" in body
        assert result.store_item_sid == "s-9"

    def test_expire_soon_param(self, client, backend):
        backend.on("GET", "/warehouse/items", body=[])

        WarehouseAPI(client).get_items(expire_soon=True)

        assert backend.requests[0].url.params["expire_soon"] == "true"

    def test_delete_item_query(self, client, backend):
        backend.on("DELETE", "/warehouse/items", status=204)

        WarehouseAPI(client).delete_item("w-1", 3)

        params = backend.requests[0].url.params
        assert params["item_sid"] == "w-1"
        assert params["quantity"] == "3"


class TestTokenStores:

    def test_memory_store(self):
        store = MemoryTokenStore()
        store.set("abc")

        assert store.get() == "abc"
        store.clear()
        assert store.get() is None

    def test_file_store_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "token"
        store = FileTokenStore(str(path))

        assert store.get() is None
        store.set("abc")

        assert store.get() == "abc"
        assert path.stat().st_mode & 0o777 == 0o600

        store.clear()
        assert store.get() is None
        assert not path.exists()

    def test_file_store_clear_when_missing(self, tmp_path):
        FileTokenStore(str(tmp_path / "token")).clear()


class TestErrorHelpers:

    def test_extract_detail_message(self):
        assert extract_detail_message("Bad", "fallback") == "Bad"
        assert extract_detail_message(None, "fallback") == "fallback"
        assert extract_detail_message([{"loc": []}], "fallback") == "fallback"

