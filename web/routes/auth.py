"""
Routes for the sign-in, registration and password recovery pages.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from core.auth import AuthService
from core.config import DASHBOARD_PATH, RESET_PASSWORD_PATH, logger
from core.session_store import SESSION_ID_KEY, ServerSideStorage
from web.deps import get_auth_service, get_session_storage
from web.flash import flash
from web.templating import render

auth_router = APIRouter()


async def _signed_in(auth: AuthService) -> bool:
    result = await auth.get_current_user()
    return result.user is not None


@auth_router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, auth: AuthService = Depends(get_auth_service)):
    if await _signed_in(auth):
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)
    return render(request, "login.html", {"email": ""})


@auth_router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    auth: AuthService = Depends(get_auth_service),
):
    email = email.strip()
    if not email or not password:
        return render(request, "login.html", {"email": email, "error": "Please fill in all fields"}, 400)

    result = await auth.sign_in(email, password)
    if result.error:
        return render(request, "login.html", {"email": email, "error": result.error.message}, 400)

    flash(request, "Welcome back!")
    return RedirectResponse(url=DASHBOARD_PATH, status_code=303)


@auth_router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request, auth: AuthService = Depends(get_auth_service)):
    if await _signed_in(auth):
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)
    return render(request, "register.html", {"email": "", "full_name": ""})


@auth_router.post("/register")
async def register(
    request: Request,
    full_name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    auth: AuthService = Depends(get_auth_service),
):
    email = email.strip()
    full_name = full_name.strip()
    ctx = {"email": email, "full_name": full_name}

    if not email or not password:
        return render(request, "register.html", {**ctx, "error": "Please fill in all required fields"}, 400)
    if password != confirm_password:
        return render(request, "register.html", {**ctx, "error": "Passwords do not match"}, 400)

    result = await auth.sign_up(email, password, full_name or None)
    if result.error:
        return render(request, "register.html", {**ctx, "error": result.error.message}, 400)

    if result.data.session:
        flash(request, "Account created successfully!")
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)

    # Email confirmation is on: the provider issued no session yet.
    flash(request, f"Account created! Check {email} to confirm your address.")
    return RedirectResponse(url="/auth/login", status_code=303)


@auth_router.get("/forgot-password", response_class=HTMLResponse)
async def forgot_password_page(request: Request):
    return render(request, "forgot_password.html", {"email": "", "submitted": False})


@auth_router.post("/forgot-password")
async def forgot_password(
    request: Request,
    email: str = Form(""),
    auth: AuthService = Depends(get_auth_service),
):
    email = email.strip()
    if not email:
        return render(
            request, "forgot_password.html",
            {"email": email, "submitted": False, "error": "Please enter your email address"}, 400,
        )

    result = await auth.reset_password(email)
    if result.error:
        return render(
            request, "forgot_password.html",
            {"email": email, "submitted": False, "error": result.error.message}, 400,
        )

    flash(request, "Password reset email sent!")
    return render(request, "forgot_password.html", {"email": email, "submitted": True})


@auth_router.get("/reset-password", response_class=HTMLResponse)
async def reset_password_page(
    request: Request,
    code: Optional[str] = None,
    error_description: Optional[str] = None,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Landing page of the recovery email. The provider appends a one-time `code`
    which is traded for a session before the new password can be set.
    """
    if error_description:
        return render(request, "reset_password.html", {"error": error_description, "can_reset": False}, 400)

    if code:
        result = await auth.exchange_code(code)
        if result.error:
            return render(request, "reset_password.html", {"error": result.error.message, "can_reset": False}, 400)
        logger.info("Recovery link accepted")
        return RedirectResponse(url=RESET_PASSWORD_PATH, status_code=303)

    current = await auth.get_current_user()
    return render(request, "reset_password.html", {
        "can_reset": current.user is not None,
        "current_user": current.user,
    })


@auth_router.post("/reset-password")
async def reset_password(
    request: Request,
    password: str = Form(""),
    confirm_password: str = Form(""),
    auth: AuthService = Depends(get_auth_service),
):
    if not password:
        return render(request, "reset_password.html", {"error": "Please enter a new password", "can_reset": True}, 400)
    if password != confirm_password:
        return render(request, "reset_password.html", {"error": "Passwords do not match", "can_reset": True}, 400)

    result = await auth.update_password(password)
    if result.error:
        return render(request, "reset_password.html", {"error": result.error.message, "can_reset": True}, 400)

    flash(request, "Password updated successfully!")
    return RedirectResponse(url=DASHBOARD_PATH, status_code=303)


@auth_router.post("/logout")
async def logout(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    storage: ServerSideStorage = Depends(get_session_storage),
):
    result = await auth.sign_out()
    # Whatever the provider answered, this browser keeps no provider state.
    await storage.clear()
    request.session.pop(SESSION_ID_KEY, None)
    if result.error:
        flash(request, result.error.message, "error")
        return RedirectResponse(url="/auth/login", status_code=303)

    flash(request, "Successfully signed out")
    return RedirectResponse(url="/", status_code=303)
