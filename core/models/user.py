"""
Read-only views of the identity provider's user and session objects.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


def _metadata(obj: Any, name: str) -> dict:
    value = getattr(obj, name, None)
    return value if isinstance(value, dict) else {}


class AuthUser(BaseModel):
    """A user account as reported by the provider. Never persisted locally."""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    provider: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None
    email_confirmed_at: Optional[datetime] = None

    @classmethod
    def from_provider(cls, user: Any) -> "AuthUser":
        """Builds an AuthUser from the provider SDK's user object."""
        user_metadata = _metadata(user, "user_metadata")
        app_metadata = _metadata(user, "app_metadata")
        return cls(
            id=str(user.id),
            email=getattr(user, "email", None),
            full_name=user_metadata.get("full_name") or user_metadata.get("name"),
            avatar_url=user_metadata.get("avatar_url"),
            provider=app_metadata.get("provider"),
            created_at=getattr(user, "created_at", None),
            updated_at=getattr(user, "updated_at", None),
            last_sign_in_at=getattr(user, "last_sign_in_at", None),
            email_confirmed_at=getattr(user, "email_confirmed_at", None),
        )

    @property
    def display_name(self) -> str:
        return self.full_name or "User"

    @property
    def initial(self) -> str:
        source = self.full_name or self.email or "?"
        return source[0].upper()

    @property
    def is_verified(self) -> bool:
        return self.email_confirmed_at is not None


class SessionInfo(BaseModel):
    """The parts of a provider session the UI may look at."""
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: str = "bearer"

    @classmethod
    def from_provider(cls, session: Any) -> "SessionInfo":
        return cls(
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", None),
            expires_at=getattr(session, "expires_at", None),
            token_type=getattr(session, "token_type", None) or "bearer",
        )
