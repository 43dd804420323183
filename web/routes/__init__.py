"""
Web Routes for FastAPI
"""
from datetime import datetime

import httpx
from fastapi import APIRouter

from core.config import SUPABASE_URL, SUPABASE_ANON_KEY, config, logger

from .pages import pages_router
from .oauth import oauth_router
from .auth import auth_router
from .api import api_router

health_router = APIRouter()


async def check_provider() -> str:
    """Checks the identity provider's health endpoint."""
    if not config.provider_configured:
        return "not_configured"
    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(
                f"{SUPABASE_URL}/auth/v1/health",
                headers={"apikey": SUPABASE_ANON_KEY},
            )
    except httpx.HTTPError as e:
        logger.warning(f"Identity provider health check failed: {e}")
        return "unreachable"
    return "healthy" if response.status_code == 200 else "unhealthy"


# Health check endpoints
@health_router.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": "secureauth"
    }


@health_router.get("/health/detailed")
async def health_check_detailed():
    """Detailed health check with dependency status"""
    provider = await check_provider()
    return {
        "status": "healthy" if provider == "healthy" else "degraded",
        "timestamp": datetime.utcnow().isoformat(),
        "service": "secureauth",
        "dependencies": {
            "identity_provider": provider
        }
    }
