"""Tests for dashboard stats and the dashboard server."""

import pytest
from fastapi.testclient import TestClient

from inventory_client.dashboard_server import app, config as dashboard_config
from inventory_client.models.dashboard import DashboardStats

from conftest import reports_json, store_item_json, warehouse_item_json


@pytest.fixture
def stocked(backend):
    backend.on("GET", "/warehouse/items", body=[warehouse_item_json()])
    backend.on("GET", "/store/items", body=[store_item_json(), store_item_json(sid="s-2")])
    backend.on("GET", "/store/reports", body=reports_json(total_sales=99.0, total_items_sold=9))
    return backend


@pytest.fixture
def http(service):
    app.state.inventory = service
    with TestClient(app) as test_client:
        yield test_client
    app.state.inventory = None


class TestDashboardService:

    def test_fetch_stats(self, service, stocked):
        stats = service.dashboard.fetch_stats()

        assert stats.products_in_warehouse == 1
        assert stats.products_in_store == 2
        assert stats.total_products == 1
        assert stats.total_revenue_last_30_days == 99.0

    def test_stats_cached(self, service, stocked):
        service.dashboard.fetch_stats()
        service.dashboard.fetch_stats()

        assert len(stocked.calls("GET", "/store/reports")) == 1

    def test_any_failing_call_fails_fetch(self, service, stocked):
        stocked.on("GET", "/store/reports", status=500)

        stats = service.dashboard.fetch_stats()

        assert stats == DashboardStats()
        assert service.dashboard.error == "Failed to fetch store reports"


class TestDashboardServer:

    def test_health(self, http):
        response = http.get("/health")

        assert response.status_code == 200
        assert response.json()["authenticated"] is True

    def test_stats_endpoint(self, http, stocked):
        response = http.get("/api/dashboard/stats")

        body = response.json()
        assert response.status_code == 200
        assert body["error"] is None
        assert body["data"]["total_sales_last_30_days"] == 9

    def test_store_items_endpoint(self, http, stocked):
        response = http.get("/api/store/items", params={"status": "active"})

        assert [item["sid"] for item in response.json()["data"]] == ["s-1", "s-2"]

    def test_unknown_store_status(self, http):
        response = http.get("/api/store/items", params={"status": "sold"})

        assert response.status_code == 400

    def test_session_expiry_redirects_to_login(self, http, backend, token_store):
        backend.on("GET", "/warehouse/items", status=401, body={"detail": "Token expired"})

        response = http.get("/api/warehouse/items", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/auth/login"
        assert token_store.get() is None

    def test_login_required_page(self, http):
        response = http.get("/auth/login")

        assert response.status_code == 401

    def test_login(self, http, backend, token_store):
        token_store.clear()
        backend.on("POST", "/auth/login", body={"access_token": "fresh"})

        response = http.post("/api/auth/login", json={"email": "a@b.com", "password": "x"})

        assert response.status_code == 200
        assert token_store.get() == "fresh"

    def test_failed_login(self, http, backend):
        backend.on("POST", "/auth/login", status=400, body={"detail": "Incorrect email or password"})

        response = http.post("/api/auth/login", json={"email": "a@b.com", "password": "x"})

        assert response.status_code == 401
        assert response.json()["error"] == "Incorrect email or password"

    def test_malformed_backend_row_is_reported_not_500(self, http, stocked):
        stocked.on("GET", "/warehouse/items", body=[warehouse_item_json(quantity=-1)])

        response = http.get("/api/dashboard/stats")

        body = response.json()
        assert response.status_code == 200
        assert body["error"] == "Unexpected response for dashboard.stats"
        assert body["data"]["total_products"] == 0

    def test_health_timestamp_is_utc(self, http):
        timestamp = http.get("/health").json()["timestamp"]

        assert timestamp.endswith("+00:00")


class TestPeriodicRefresh:

    def test_lifespan_registers_refresh_job(self, service, scheduler, monkeypatch):
        monkeypatch.setattr(dashboard_config.refresh, "periodic_interval_minutes", 5)
        app.state.inventory = service

        with TestClient(app):
            assert set(scheduler.periodic) == {"refresh_all"}
        app.state.inventory = None

    def test_refresh_all_forces_every_view(self, service, stocked, scheduler, monkeypatch):
        monkeypatch.setattr(dashboard_config.refresh, "periodic_interval_minutes", 5)
        app.state.inventory = service
        service.store.fetch_active_items()

        with TestClient(app):
            scheduler.periodic["refresh_all"]()
        app.state.inventory = None

        assert len(stocked.calls("GET", "/store/reports")) == 2
        assert len(stocked.calls("GET", "/warehouse/items")) == 2
