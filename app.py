"""
SecureAuth Web Application - FastAPI Version
"""
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import StarletteHTTPException
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
import uvicorn

# Import configuration and logging
from core.config import (
    config, logger, APP_NAME, CORS_ORIGINS, SECRET_KEY,
    SESSION_COOKIE_NAME, SESSION_MAX_AGE_SECONDS,
)
from core.provider import ProviderNotConfigured, close_http_client, get_http_client
from core.session_store import close_session_backend, get_session_backend

# Import routers
from web.routes import (
    auth_router, oauth_router, health_router, pages_router, api_router
)
from web.templating import STATIC_DIR, render

IS_DEVELOPMENT = config.is_development


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"{APP_NAME} starting...")
    if not config.provider_configured:
        logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY not set; authentication pages will return 503")
    get_http_client()
    get_session_backend()
    yield
    # Shutdown
    logger.info(f"{APP_NAME} shutting down...")
    await close_http_client()
    await close_session_backend()

# Create FastAPI app
app = FastAPI(
    title=APP_NAME,
    description="Sign-up, sign-in and account pages backed by a hosted identity provider",
    version="1.0.0",
    docs_url="/docs" if IS_DEVELOPMENT else None,
    redoc_url="/redoc" if IS_DEVELOPMENT else None,
    lifespan=lifespan
)

# Add Session Middleware. SameSite=lax lets the cookie ride along on the
# top-level redirect back from OAuth and email links.
app.add_middleware(
    SessionMiddleware,
    secret_key=SECRET_KEY,
    session_cookie=SESSION_COOKIE_NAME,
    max_age=SESSION_MAX_AGE_SECONDS,
    same_site="lax",
    https_only=config.https_only_cookies,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if request.url.path.startswith("/api/"):
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)
    return render(request, "error.html", {
        "status_code": exc.status_code,
        "message": exc.detail or "Something went wrong",
    }, exc.status_code)


@app.exception_handler(ProviderNotConfigured)
async def provider_not_configured_handler(request: Request, exc: ProviderNotConfigured):
    logger.error(f"Request to {request.url.path} with no identity provider configured")
    if request.url.path.startswith("/api/"):
        return JSONResponse({"detail": "Authentication service unavailable"}, status_code=503)
    return render(request, "error.html", {
        "status_code": 503,
        "message": "Authentication service is not configured.",
    }, 503)


# Mount static files
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Include routers
app.include_router(health_router, tags=["health"])
app.include_router(auth_router, prefix="/auth", tags=["authentication"])
app.include_router(oauth_router, prefix="/auth/oauth", tags=["oauth"])
app.include_router(api_router, prefix="/api", tags=["api"])
app.include_router(pages_router, include_in_schema=False)


if __name__ == "__main__":
    uvicorn.run(
        "app:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 5678)),
        reload=IS_DEVELOPMENT,
    )
