"""Tests for login, logout and the global 401 handling."""

import pytest

from inventory_client.utils.exceptions import AuthenticationError, SessionExpiredError

from conftest import store_item_json


class TestLogin:

    def test_login_stores_token(self, service, backend, token_store):
        token_store.clear()
        service.auth.check_auth()
        backend.on("POST", "/auth/login", body={"access_token": "new-token", "token_type": "bearer"})

        service.auth.login("john.doe@example.com", "secret")

        assert token_store.get() == "new-token"
        assert service.auth.is_authenticated
        body = backend.calls("POST", "/auth/login")[0].content.decode()
        assert "username=john.doe%40example.com" in body
        assert "password=secret" in body

    def test_login_failure(self, service, backend, token_store):
        token_store.clear()
        backend.on("POST", "/auth/login", status=400, body={"detail": "Incorrect email or password"})

        with pytest.raises(AuthenticationError, match="Incorrect email or password"):
            service.auth.login("john@example.com", "wrong")

        assert service.auth.error == "Incorrect email or password"
        assert not service.auth.is_authenticated
        assert not service.auth.is_loading

    def test_register(self, service, backend):
        backend.on("POST", "/auth/register", body={"sid": "u-1", "email": "a@b.com", "role": "owner"})

        user = service.auth.register("a@b.com", "secret")

        assert user.role == "owner"
        assert service.auth.user is user


class TestLogout:

    def test_logout_clears_session_and_cache(self, service, backend, token_store):
        backend.on("GET", "/store/items", body=[store_item_json()])
        backend.on("POST", "/auth/logout", status=204)
        service.store.fetch_active_items()

        service.auth.logout()

        assert token_store.get() is None
        assert not service.auth.is_authenticated
        assert list(service.cache.keys()) == []

    def test_logout_clears_session_when_backend_fails(self, service, backend, token_store):
        backend.on("POST", "/auth/logout", status=500)

        service.auth.logout()

        assert token_store.get() is None
        assert not service.auth.is_authenticated


class TestSessionExpiry:

    def test_401_on_any_endpoint(self, service, backend, token_store, redirects):
        backend.on("GET", "/store/items", body=[store_item_json()])
        service.store.fetch_active_items()
        backend.on("GET", "/warehouse/items", status=401, body={"detail": "Could not validate credentials"})

        with pytest.raises(SessionExpiredError):
            service.warehouse.fetch_items()

        assert token_store.get() is None
        assert redirects == ["/auth/login"]
        assert not service.auth.is_authenticated
        assert list(service.cache.keys()) == []

    def test_check_auth_follows_store(self, service, token_store):
        assert service.auth.check_auth()

        token_store.clear()

        assert not service.auth.check_auth()
