"""
Supabase client construction.
"""
from typing import Optional

import httpx
from supabase import AsyncClient, AsyncClientOptions, acreate_client
from supabase_auth import AsyncSupportedStorage

from core.config import SUPABASE_URL, SUPABASE_ANON_KEY, config, logger


class ProviderNotConfigured(RuntimeError):
    """SUPABASE_URL or SUPABASE_ANON_KEY is missing."""


# Global HTTP client shared by every per-request provider client
_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """Returns the shared connection pool, creating it on first use."""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(timeout=10.0)
        logger.info("Identity provider HTTP client created")
    return _http_client


async def close_http_client():
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
        logger.info("Identity provider HTTP client closed")


async def create_provider_client(storage: AsyncSupportedStorage) -> AsyncClient:
    """
    Returns an async Supabase client whose auth session lives in `storage`.

    PKCE is used so redirect-based flows (OAuth, email confirmation, recovery
    links) come back to the server as a `code` query parameter. Token refresh
    happens lazily inside `get_session`, so no background refresh task is started.
    All clients share one HTTP connection pool, closed at application shutdown.
    """
    if not config.provider_configured:
        raise ProviderNotConfigured("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

    options = AsyncClientOptions(
        storage=storage,
        flow_type="pkce",
        persist_session=True,
        auto_refresh_token=False,
        httpx_client=get_http_client(),
    )
    client = await acreate_client(SUPABASE_URL, SUPABASE_ANON_KEY, options=options)
    logger.debug("Supabase client created for request")
    return client
