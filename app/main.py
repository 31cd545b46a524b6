"""FastAPI application entry point for the GCP Project Manager API."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.routers import auth_router, projects_router, users_router
from app.services.auth import OAuthStateCache
from app.services.sessions import InMemorySessionStore, SessionStore
from app.utils.helpers import utc_timestamp
from app.utils.rate_limit import api_rate_limit_middleware, is_api_path, limiter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    logger.info("Starting GCP Project Manager API...")
    logger.info(f"Frontend URL: {settings.frontend_url}")
    logger.info(f"OAuth redirect URI: {settings.redirect_uri}")
    if not settings.google_client_id or not settings.google_client_secret:
        logger.warning("Google OAuth client credentials are not configured")
    if not settings.strict_upstream:
        logger.info("Demo mode enabled: upstream failures return fabricated data")

    yield

    logger.info("Shutting down GCP Project Manager API...")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors, with a fixed body for unknown /api routes."""
    if exc.status_code == status.HTTP_404_NOT_FOUND and is_api_path(request.url.path):
        detail = "API endpoint not found"
    else:
        detail = exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as bad requests."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected errors."""
    logger.exception(f"Server error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(session_store: SessionStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="GCP Project Manager API",
        description="Manage Google Cloud projects after signing in with Google",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )

    if session_store is None:
        session_store = InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)
    app.state.session_store = session_store
    app.state.oauth_states = OAuthStateCache()
    app.state.limiter = limiter

    # Rate limit /api paths before routing, inside CORS
    app.middleware("http")(api_rate_limit_middleware)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    # Include routers
    app.include_router(auth_router)
    app.include_router(users_router, prefix="/api")
    app.include_router(projects_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "OK",
            "timestamp": utc_timestamp(),
        }

    @app.api_route(
        "/api/{path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    async def unknown_api_route(path: str):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    @app.get("/{path:path}", include_in_schema=False)
    async def root(path: str):
        """Describe the API server on any non-API GET."""
        return {
            "message": "GCP Project Manager API Server",
            "status": "running",
            "endpoints": {
                "auth": "/auth/google",
                "api": "/api/*",
            },
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=get_settings().port,
        reload=not get_settings().is_production,
    )
