"""
FastAPI dependencies wiring the authentication facade into the routes.
"""
from fastapi import Depends, Request

from core.auth import AuthService
from core.config import SITE_URL
from core.provider import create_provider_client
from core.session_store import SESSION_ID_KEY, ServerSideStorage, get_session_backend, new_session_id


def site_origin(request: Request) -> str:
    """The origin redirect targets are built on: SITE_URL, else the request's own."""
    if SITE_URL:
        return SITE_URL
    return str(request.base_url).rstrip("/")


def get_session_storage(request: Request) -> ServerSideStorage:
    """Provider storage for this browser. The cookie only carries the session id."""
    sid = request.session.get(SESSION_ID_KEY)
    if not sid:
        sid = new_session_id()
        request.session[SESSION_ID_KEY] = sid
    return ServerSideStorage(get_session_backend(), sid)


async def get_auth_service(
    request: Request,
    storage: ServerSideStorage = Depends(get_session_storage),
) -> AuthService:
    """Builds a facade whose provider session lives in this browser's server-side storage."""
    client = await create_provider_client(storage)
    return AuthService(client, site_origin(request))
