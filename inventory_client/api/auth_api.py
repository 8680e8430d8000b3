"""Auth endpoints."""

from .api_client import ApiClient
from ..models.auth import AuthResponse, User


class AuthAPI:
    """``/auth/*`` endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    def login(self, email: str, password: str) -> AuthResponse:
        """OAuth2 password form: the e-mail goes in ``username``."""
        data = self.client.request_json(
            "POST", "/auth/login", "Login failed",
            data={"username": email, "password": password}
        )
        return AuthResponse.from_dict(data)

    def register(self, email: str, password: str) -> User:
        data = self.client.request_json(
            "POST", "/auth/register", "Registration failed",
            json={"email": email, "password": password}
        )
        return User.from_dict(data)

    def verify(self, email: str, code: str) -> User:
        data = self.client.request_json(
            "POST", "/auth/verify", "Verification failed",
            json={"email": email, "code": code}
        )
        return User.from_dict(data)

    def logout(self):
        self.client.request_json("POST", "/auth/logout", "Logout failed")
