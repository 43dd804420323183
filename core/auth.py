"""
Authentication facade over the identity provider.

Each method performs one provider call and answers with a result envelope.
Provider exceptions never propagate past this module; callers check `error`.
"""
from typing import Any, Optional

from core.config import DASHBOARD_PATH, RESET_PASSWORD_PATH, logger
from core.models.user import AuthUser, SessionInfo
from core.schemas import AuthPayload, AuthResult, ProviderError, StatusResult, UserResult


def _payload(response: Any) -> AuthPayload:
    user = getattr(response, "user", None)
    session = getattr(response, "session", None)
    return AuthPayload(
        user=AuthUser.from_provider(user) if user else None,
        session=SessionInfo.from_provider(session) if session else None,
    )


def _failure(operation: str, exc: Exception, subject: str = "") -> ProviderError:
    error = ProviderError.from_exception(exc)
    logger.warning(f"{operation} failed{' for ' + subject if subject else ''}: {error.name}: {error.message}")
    return error


class AuthService:
    """
    Stateless wrapper around a provider client's `auth` interface.

    Args:
        client: a Supabase client (or anything exposing the same `auth` API)
        origin: scheme and host of this site, used to build redirect targets
    """

    def __init__(self, client: Any, origin: str):
        self._auth = client.auth
        self.origin = origin.rstrip("/")

    def redirect_url(self, path: str) -> str:
        return f"{self.origin}{path}"

    async def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> AuthResult:
        try:
            response = await self._auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "data": {"full_name": full_name},
                    "email_redirect_to": self.redirect_url(DASHBOARD_PATH),
                },
            })
            result = AuthResult(data=_payload(response))
        except Exception as e:
            return AuthResult(error=_failure("Sign up", e, email))

        logger.info(f"Account created for {email}")
        return result

    async def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            response = await self._auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
            result = AuthResult(data=_payload(response))
        except Exception as e:
            return AuthResult(error=_failure("Sign in", e, email))

        logger.info(f"User signed in: {email}")
        return result

    async def sign_out(self) -> StatusResult:
        try:
            await self._auth.sign_out()
        except Exception as e:
            return StatusResult(error=_failure("Sign out", e))

        logger.info("User signed out")
        return StatusResult()

    async def reset_password(self, email: str) -> StatusResult:
        """
        Asks the provider to email a recovery link pointing at the
        reset-password page. The provider answers success for unknown
        addresses as well.
        """
        try:
            await self._auth.reset_password_for_email(
                email,
                {"redirect_to": self.redirect_url(RESET_PASSWORD_PATH)},
            )
        except Exception as e:
            return StatusResult(error=_failure("Password reset request", e, email))

        logger.info(f"Password reset requested for {email}")
        return StatusResult()

    async def update_password(self, password: str) -> StatusResult:
        """Changes the password of the user owning the current session."""
        try:
            await self._auth.update_user({"password": password})
        except Exception as e:
            return StatusResult(error=_failure("Password update", e))

        logger.info("Password updated for current session")
        return StatusResult()

    async def get_current_user(self) -> UserResult:
        try:
            session = await self._auth.get_session()
            user = getattr(session, "user", None) if session else None
            return UserResult(user=AuthUser.from_provider(user) if user else None)
        except Exception as e:
            return UserResult(error=_failure("Session lookup", e))

    async def sign_in_with_oauth(self, provider: str = "google") -> AuthResult:
        """
        Starts a redirect-based sign-in. The payload's `url` is where the
        browser must go; the provider sends it back to the dashboard with a code.
        """
        try:
            response = await self._auth.sign_in_with_oauth({
                "provider": provider,
                "options": {"redirect_to": self.redirect_url(DASHBOARD_PATH)},
            })
            result = AuthResult(data=AuthPayload(
                provider=getattr(response, "provider", None) or provider,
                url=response.url,
            ))
        except Exception as e:
            return AuthResult(error=_failure("OAuth sign in", e, provider))

        logger.info(f"OAuth sign in started with {provider}")
        return result

    async def exchange_code(self, auth_code: str) -> AuthResult:
        """Completes a PKCE redirect by trading its `code` for a session."""
        try:
            response = await self._auth.exchange_code_for_session({"auth_code": auth_code})
            result = AuthResult(data=_payload(response))
        except Exception as e:
            return AuthResult(error=_failure("Code exchange", e))

        logger.info("Authorization code exchanged for a session")
        return result
