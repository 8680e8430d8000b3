"""Inventory backend HTTP client: bearer auth and the global 401 handler."""

from typing import Any, Callable, Optional

import httpx

from .base_client import BaseClient
from ..utils.config import get_config
from ..utils.logger import get_session_logger
from ..utils.exceptions import ApiError, SessionExpiredError

UnauthorizedHandler = Callable[[str], None]


class ApiClient(BaseClient):
    """Client for the inventory REST API.

    Every request carries ``Authorization: Bearer <token>`` when the token
    store holds a token. A 401 from any endpoint clears the stored token,
    calls ``on_unauthorized`` with the login path and raises
    ``SessionExpiredError``.
    """

    def __init__(
        self,
        token_store,
        base_url: Optional[str] = None,
        on_unauthorized: Optional[UnauthorizedHandler] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        config = get_config()
        super().__init__(
            base_url=base_url or config.env.api_base_url,
            transport=transport
        )
        self.token_store = token_store
        self.on_unauthorized = on_unauthorized
        self.login_path = config.auth.login_path
        self.session_logger = get_session_logger()

    def _auth_headers(self) -> dict:
        token = self.token_store.get()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def request_json(self, method: str, endpoint: str, fallback: str, **kwargs) -> Any:
        """
        Send an authenticated request and return the decoded JSON body.

        Args:
            method: HTTP method
            endpoint: Path relative to the API base URL
            fallback: Error message used when the response carries no ``detail``
            **kwargs: Passed to ``httpx.Client.request`` (params, json, data, files)

        Returns:
            Decoded JSON, or None for an empty body.

        Raises:
            SessionExpiredError: On HTTP 401
            ApiError: On any other non-2xx status or transport failure
        """
        headers = {**kwargs.pop("headers", {}), **self._auth_headers()}

        try:
            response = self._make_request_with_retry(method, endpoint, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            self.logger.error(f"{method} {endpoint} failed: {str(e)}")
            raise ApiError(fallback, details={"error": str(e)})

        if response.status_code == 401:
            self._handle_unauthorized(method, endpoint)
            error = ApiError.from_response(response, fallback)
            raise SessionExpiredError(
                error.message,
                status_code=401,
                detail=error.detail,
                details=error.details
            )

        if response.is_error:
            error = ApiError.from_response(response, fallback)
            self.logger.warning(
                f"{method} {endpoint} -> HTTP {response.status_code}: {error.message}"
            )
            raise error

        if not response.content:
            return None
        return response.json()

    def _handle_unauthorized(self, method: str, endpoint: str):
        self.session_logger.warning(
            f"{method} {endpoint} returned 401, clearing session and redirecting to {self.login_path}"
        )
        self.token_store.clear()
        if self.on_unauthorized:
            self.on_unauthorized(self.login_path)
