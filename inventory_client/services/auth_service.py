"""Authentication session bookkeeping."""

from typing import Optional

from ..api.auth_api import AuthAPI
from ..models.auth import User
from ..utils.exceptions import ApiError, AuthenticationError
from ..utils.logger import get_session_logger


class AuthService:
    """
    Session flag derived from the token store.

    There is no client-side expiry check or token refresh: an expired token
    is discovered when the backend answers 401, at which point the API
    client clears it.
    """

    def __init__(self, api: AuthAPI, token_store, on_logout=None):
        self.api = api
        self.token_store = token_store
        self.on_logout = on_logout
        self.logger = get_session_logger()

        self.user: Optional[User] = None
        self.error: Optional[str] = None
        self.is_loading = False
        self.token: Optional[str] = token_store.get()
        self.is_authenticated = bool(self.token)

    def check_auth(self) -> bool:
        """Re-read the token store and refresh the session flag."""
        self.token = self.token_store.get()
        self.is_authenticated = bool(self.token)
        return self.is_authenticated

    def login(self, email: str, password: str):
        self.is_loading = True
        self.error = None
        try:
            response = self.api.login(email, password)
        except ApiError as e:
            self.error = e.message
            self.is_authenticated = False
            self.logger.warning(f"Login failed for {email}: {e.message}")
            raise AuthenticationError(e.message, details={"status_code": e.status_code})
        finally:
            self.is_loading = False

        self.token_store.set(response.access_token)
        self.token = response.access_token
        self.is_authenticated = True
        self.logger.info(f"Logged in as {email}")

    def register(self, email: str, password: str) -> User:
        return self._account_call(
            lambda: self.api.register(email, password), "Registration failed"
        )

    def verify(self, email: str, code: str) -> User:
        return self._account_call(lambda: self.api.verify(email, code), "Verification failed")

    def _account_call(self, call, action: str) -> User:
        self.is_loading = True
        self.error = None
        try:
            self.user = call()
            return self.user
        except ApiError as e:
            self.error = e.message
            self.logger.warning(f"{action}: {e.message}")
            raise AuthenticationError(e.message, details={"status_code": e.status_code})
        finally:
            self.is_loading = False

    def logout(self):
        """End the session; local state is cleared even if the backend call fails."""
        self.is_loading = True
        try:
            self.api.logout()
        except ApiError as e:
            self.logger.warning(f"Logout request failed, clearing session anyway: {e.message}")
        finally:
            self.token_store.clear()
            self.user = None
            self.token = None
            self.is_authenticated = False
            self.is_loading = False
            if self.on_logout:
                self.on_logout()
        self.logger.info("Logged out")
