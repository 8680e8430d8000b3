"""Account data models."""

from dataclasses import dataclass, asdict
from typing import Dict, Any

USER_ROLES = ("owner", "admin", "manager")


@dataclass
class User:
    sid: str
    email: str
    is_verified: bool = False
    role: str = "manager"

    def __post_init__(self):
        if self.role not in USER_ROLES:
            raise ValueError(f"Role must be one of {', '.join(USER_ROLES)}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            sid=data.get("sid", ""),
            email=data["email"],
            is_verified=data.get("is_verified", False),
            role=data.get("role", "manager")
        )


@dataclass
class AuthResponse:
    access_token: str
    token_type: str = "bearer"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthResponse":
        return cls(
            access_token=data["access_token"],
            token_type=data.get("token_type", "bearer")
        )
