"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from modules.admin.routes import router as admin_router
from modules.auth.routes import router as auth_router
from modules.cart.routes import router as cart_router
from modules.users.routes import router as users_router, verify_router
from modules.video.routes import router as video_router
from shared.config import get_settings
from shared.logging import configure_logging

from .error_handlers import register_error_handlers
from .models import AUTH_ERROR_RESPONSES
from .routes import health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings)
    if not settings.session_secret:
        logger.warning("SESSION_SECRET is not set; authenticated endpoints will fail")
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Pet-services marketplace API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_error_handlers(app)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(users_router, prefix="/api/users", tags=["users"], responses=AUTH_ERROR_RESPONSES)
    app.include_router(verify_router, prefix="/api/verify", tags=["verify"], responses=AUTH_ERROR_RESPONSES)
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"], responses=AUTH_ERROR_RESPONSES)
    app.include_router(video_router, prefix="/api/video", tags=["video"], responses=AUTH_ERROR_RESPONSES)
    app.include_router(cart_router, prefix="/api/cart", tags=["cart"], responses=AUTH_ERROR_RESPONSES)

    return app


# Application instance for uvicorn
app = create_app()
