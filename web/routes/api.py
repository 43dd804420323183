"""
JSON routes exposing the facade's envelopes to browser scripts.
"""
from fastapi import APIRouter, Depends

from core.auth import AuthService
from core.schemas import UserResult
from web.deps import get_auth_service

api_router = APIRouter()


@api_router.get("/users/me", response_model=UserResult)
async def current_user(auth: AuthService = Depends(get_auth_service)):
    """Returns `{user, error}`; `user` is null when nobody is signed in."""
    return await auth.get_current_user()
