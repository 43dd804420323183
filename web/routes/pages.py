"""
Routes for the landing page and the signed-in dashboard.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from core.auth import AuthService
from core.config import DASHBOARD_PATH
from core.models.user import AuthUser
from web.deps import get_auth_service
from web.flash import flash
from web.templating import render

pages_router = APIRouter()

FEATURES = [
    "Multi-factor authentication",
    "Social login integration",
    "Password reset functionality",
    "User profile management",
    "Real-time session management",
    "Comprehensive audit logs",
]


def dashboard_stats(user: AuthUser) -> list:
    last_login = user.last_sign_in_at.strftime("%b %d, %Y") if user.last_sign_in_at else "Today"
    return [
        {"title": "Account Status", "value": "Active", "icon": "shield", "tone": "green"},
        {"title": "Last Login", "value": last_login, "icon": "calendar", "tone": "blue"},
        {"title": "Security Level", "value": "High" if user.is_verified else "Standard", "icon": "lock", "tone": "purple"},
        {"title": "Sessions", "value": "1 Active", "icon": "activity", "tone": "emerald"},
    ]


@pages_router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def landing_page(request: Request):
    """Serves the public landing page."""
    return render(request, "landing.html", {"features": FEATURES})


@pages_router.get("/dashboard", response_class=HTMLResponse, include_in_schema=False)
async def dashboard(
    request: Request,
    code: Optional[str] = None,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Signed-in home. Also the return target of OAuth sign-in and email
    confirmation, which arrive with a one-time `code`.
    """
    if code:
        exchanged = await auth.exchange_code(code)
        if exchanged.error:
            flash(request, exchanged.error.message, "error")
            return RedirectResponse(url="/auth/login", status_code=303)
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)

    result = await auth.get_current_user()
    if result.error:
        flash(request, result.error.message, "error")
        return RedirectResponse(url="/auth/login", status_code=303)
    if result.user is None:
        return RedirectResponse(url="/auth/login", status_code=303)

    return render(request, "dashboard.html", {
        "current_user": result.user,
        "user": result.user,
        "stats": dashboard_stats(result.user),
    })
