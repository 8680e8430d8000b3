"""Pytest configuration and fixtures."""

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from inventory_client.api.token_store import MemoryTokenStore
from inventory_client.services.inventory_service import InventoryService

BASE_URL = "http://backend.test/api/v1"
API_PREFIX = "/api/v1"

Responder = Union[Tuple[int, Any], Callable[[httpx.Request], Tuple[int, Any]]]


class FakeBackend:
    """Route table served through ``httpx.MockTransport``; records every request."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Responder] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, body: Any = None):
        self.routes[(method, path)] = (status, body)

    def on_call(self, method: str, path: str, func: Callable[[httpx.Request], Tuple[int, Any]]):
        self.routes[(method, path)] = func

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == API_PREFIX + path
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len(API_PREFIX):]
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"detail": f"No route {request.method} {path}"})
        status, body = route(request) if callable(route) else route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, content=json.dumps(body), headers={"Content-Type": "application/json"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeScheduler:
    """Collects deferred jobs instead of running them on a thread."""

    def __init__(self):
        self.jobs: Dict[str, Callable[[], object]] = {}
        self.periodic: Dict[str, Callable[[], object]] = {}

    def schedule(self, job_id, func, delay=None):
        self.jobs[job_id] = func

    def add_periodic(self, job_id, func, minutes):
        self.periodic[job_id] = func

    def run_pending(self):
        jobs, self.jobs = self.jobs, {}
        for func in jobs.values():
            func()

    def shutdown(self, wait=False):
        pass


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def product_json(sid="p-1", name="Milk 1L", barcode="4600000000001", category="Dairy"):
    return {
        "sid": sid,
        "name": name,
        "category_sid": "c-1",
        "barcode": barcode,
        "default_unit": "pcs",
        "default_price": 1.5,
        "category": {"sid": "c-1", "name": category},
    }


def store_item_json(sid="s-1", quantity=10, price=2.0, status="active", product=None, discounts=None):
    return {
        "sid": sid,
        "warehouse_item_sid": "w-1",
        "quantity": quantity,
        "price": price,
        "moved_at": "2024-05-01T10:00:00",
        "status": status,
        "product": product or product_json(),
        "expire_date": "2024-05-20T00:00:00",
        "current_discounts": discounts or [],
    }


def warehouse_item_json(sid="w-1", quantity=50, status="in_stock", product_sid="p-1", expire_date="2024-06-01T00:00:00"):
    return {
        "sid": sid,
        "upload_sid": "u-1",
        "product_sid": product_sid,
        "batch_code": "B-001",
        "quantity": quantity,
        "expire_date": expire_date,
        "received_at": "2024-05-01T08:00:00",
        "status": status,
        "product": product_json(sid=product_sid),
        "urgency_level": "normal",
    }


def reports_json(total_sales=1234.5, total_items_sold=321):
    return {
        "period": {"start_date": "2024-04-01", "end_date": "2024-05-01"},
        "sales": [],
        "discounts": [],
        "removed": [],
        "summary": {
            "total_sales": total_sales,
            "total_items_sold": total_items_sold,
            "total_removed_value": 12.0,
            "total_removed_items": 3,
            "total_discount_savings": 40.0,
        },
    }


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_store():
    return MemoryTokenStore("token-123")


@pytest.fixture
def redirects():
    """Login paths the session was redirected to after a 401."""
    return []


@pytest.fixture
def service(backend, scheduler, clock, token_store, redirects):
    inventory = InventoryService(
        token_store=token_store,
        on_unauthorized=redirects.append,
        transport=backend.transport(),
        scheduler=scheduler,
        clock=clock,
        base_url=BASE_URL
    )
    yield inventory
    inventory.close()
