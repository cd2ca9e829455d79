# core/auth.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

from core.errors import ApiError

if TYPE_CHECKING:
    from core.api_client import ApiClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSession:
    """Credentials of the signed-in admin. Passed explicitly to the API client."""
    token: Optional[str] = None
    user: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def display_name(self) -> str:
        return (self.user.get("name") or self.user.get("email") or "").strip() or "Admin"

    @property
    def email(self) -> str:
        return (self.user.get("email") or "").strip().lower()


def login(client: "ApiClient", email: str, password: str) -> AdminSession:
    """POST /auth/login and build a session from the returned token and user."""
    email = (email or "").strip()
    if not email or not password:
        raise ApiError("Email and password are required")

    body = client.post("/auth/login", json={"email": email, "password": password})
    token = (body or {}).get("token")
    if not token:
        raise ApiError((body or {}).get("message") or "Login failed", payload=body)

    logger.info("Admin %s signed in", email)
    return AdminSession(token=token, user=body.get("user") or {"email": email})
