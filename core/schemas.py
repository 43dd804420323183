"""
Pydantic schemas for the result envelopes returned by the authentication facade.
Every facade call answers with one of these instead of raising; callers branch
on the `error` field.
"""
from typing import Optional

from pydantic import BaseModel, model_validator

from core.models.user import AuthUser, SessionInfo


class ProviderError(BaseModel):
    """An error raised by the identity provider, passed through unclassified."""
    message: str
    code: Optional[str] = None
    status: Optional[int] = None
    name: str = "AuthError"

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ProviderError":
        status = getattr(exc, "status", None)
        code = getattr(exc, "code", None)
        return cls(
            message=getattr(exc, "message", None) or str(exc) or exc.__class__.__name__,
            code=str(code) if code is not None else None,
            status=status if isinstance(status, int) else None,
            name=exc.__class__.__name__,
        )


class AuthPayload(BaseModel):
    """Normalised success data for register, sign-in, OAuth and code exchange."""
    user: Optional[AuthUser] = None
    session: Optional[SessionInfo] = None
    provider: Optional[str] = None
    url: Optional[str] = None


class AuthResult(BaseModel):
    data: Optional[AuthPayload] = None
    error: Optional[ProviderError] = None

    @model_validator(mode="after")
    def _exactly_one(self):
        if (self.data is None) == (self.error is None):
            raise ValueError("AuthResult needs exactly one of data or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None


class StatusResult(BaseModel):
    """Envelope for operations that only report success or failure."""
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class UserResult(BaseModel):
    """`user` is None without an error when nobody is signed in."""
    user: Optional[AuthUser] = None
    error: Optional[ProviderError] = None

    @model_validator(mode="after")
    def _not_both(self):
        if self.user is not None and self.error is not None:
            raise ValueError("UserResult cannot carry both a user and an error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None
