"""
Routes for handing the browser over to an external OAuth provider.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from core.auth import AuthService
from web.deps import get_auth_service
from web.flash import flash

oauth_router = APIRouter()


@oauth_router.get("/{provider}", include_in_schema=False)
async def oauth_login(request: Request, provider: str, auth: AuthService = Depends(get_auth_service)):
    """
    Redirects to the provider's consent screen. The identity service sends the
    browser back to /dashboard with a `code` once the handshake completes.
    """
    result = await auth.sign_in_with_oauth(provider)
    if result.error:
        flash(request, result.error.message, "error")
        return RedirectResponse(url="/auth/login", status_code=303)

    return RedirectResponse(url=result.data.url, status_code=303)
