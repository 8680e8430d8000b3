"""Custom exception classes for the application."""

from typing import Any, Optional

import httpx


class BaseAppException(Exception):
    """Base exception class for all application exceptions."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ApiError(BaseAppException):
    """Raised when the inventory backend rejects a request or is unreachable."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Any = None,
        details: dict = None
    ):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message, details)

    @classmethod
    def from_response(cls, response: httpx.Response, fallback: str) -> "ApiError":
        """Build an error whose message comes from the response ``detail``."""
        detail = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("detail")

        return cls(
            extract_detail_message(detail, fallback),
            status_code=response.status_code,
            detail=detail,
            details={"response": response.text}
        )


class SessionExpiredError(ApiError):
    """Raised when the backend answers 401 and the stored token was dropped."""
    pass


class AuthenticationError(BaseAppException):
    """Raised when login, registration or verification fails."""
    pass


class ConfigurationError(BaseAppException):
    """Raised when there's a configuration error."""
    pass


def extract_detail_message(detail: Any, fallback: str) -> str:
    """
    Turn a backend ``detail`` payload into a single user-facing message.

    FastAPI backends send either a string or a list of validation errors
    (``[{"loc": [...], "msg": "..."}]``).
    """
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list):
        messages = [
            item.get("msg") for item in detail
            if isinstance(item, dict) and item.get("msg")
        ]
        if messages:
            return "; ".join(messages)
    return fallback
