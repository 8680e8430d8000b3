"""Tests for forecast caching and selection."""

import pytest

from inventory_client.models.prediction import TimeFrame

FORECAST = [{
    "sid": "f-1",
    "product_sid": "p-1",
    "timeframe": "month",
    "period_start": "2024-06-01",
    "period_end": "2024-06-30",
    "forecast_qty": 120.5,
    "lower_bound": 100.0,
    "upper_bound": 140.0,
}]


@pytest.fixture
def prediction(service, backend):
    backend.on("GET", "/prediction/forecast/p-1", body=FORECAST)
    backend.on("GET", "/prediction/forecast/p-2", body=[])
    backend.on("GET", "/prediction/categories", body=[{"sid": "c-1", "name": "Dairy"}])
    backend.on("GET", "/prediction/products", body=[{"sid": "p-1", "name": "Milk 1L"}])
    return service.prediction


class TestForecast:

    def test_cached_per_product(self, prediction, backend):
        prediction.fetch_forecast("p-1")
        prediction.fetch_forecast("p-1")
        prediction.fetch_forecast("p-2")

        assert len(backend.calls("GET", "/prediction/forecast/p-1")) == 1
        assert len(backend.calls("GET", "/prediction/forecast/p-2")) == 1
        assert prediction.forecast("p-1")[0].upper_bound == 140.0

    def test_forecast_window_is_ten_minutes(self, prediction, backend, clock):
        prediction.fetch_forecast("p-1")
        clock.advance(500)
        prediction.fetch_forecast("p-1")
        clock.advance(101)
        prediction.fetch_forecast("p-1")

        assert len(backend.calls("GET", "/prediction/forecast/p-1")) == 2

    def test_refresh_bypasses_cache(self, prediction, backend):
        prediction.fetch_forecast("p-1")
        prediction.fetch_forecast("p-1", refresh=True)

        calls = backend.calls("GET", "/prediction/forecast/p-1")
        assert len(calls) == 2
        assert calls[0].url.params["refresh"] == "false"
        assert calls[1].url.params["refresh"] == "true"

    def test_timeframe_change_refetches_selected(self, prediction, backend):
        prediction.set_selected_product("p-1")
        prediction.fetch_forecast("p-1")

        prediction.set_selected_timeframe(TimeFrame.WEEK)

        calls = backend.calls("GET", "/prediction/forecast/p-1")
        assert len(calls) == 2
        assert calls[1].url.params["timeframe"] == "week"

    def test_periods_change_refetches_selected(self, prediction, backend):
        prediction.set_selected_product("p-1")

        prediction.set_selected_periods(6)

        assert backend.calls("GET", "/prediction/forecast/p-1")[0].url.params["periods"] == "6"

    def test_invalid_periods(self, prediction):
        with pytest.raises(ValueError):
            prediction.set_selected_periods(0)

    def test_no_refetch_without_selection(self, prediction, backend):
        prediction.set_selected_timeframe(TimeFrame.DAY)

        assert backend.requests == []


class TestCatalogue:

    def test_categories_window_is_thirty_minutes(self, prediction, backend, clock):
        prediction.fetch_categories()
        clock.advance(1700)
        prediction.fetch_categories()

        assert len(backend.calls("GET", "/prediction/categories")) == 1
        assert prediction.categories[0].name == "Dairy"

    def test_filtered_products_always_fetch(self, prediction, backend):
        prediction.fetch_products()
        prediction.fetch_products(search="milk")
        prediction.fetch_products(search="milk")

        calls = backend.calls("GET", "/prediction/products")
        assert len(calls) == 3
        assert calls[2].url.params["search"] == "milk"
        assert len(prediction.products) == 1
