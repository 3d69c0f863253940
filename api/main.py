"""
Main FastAPI application for SiteBoss.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import webhooks, quotes, policies
from .services import get_services, initialize_services
from config.settings import get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    logger.info("SiteBoss starting up...")

    # CoreConfigError propagates: no quoting without a valid core config
    initialize_services()
    logger.info("SiteBoss ready")
    yield
    logger.info("SiteBoss shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Lead qualification, auto-decline and price ranges for trades enquiries.",
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Messenger webhook ---
    app.include_router(webhooks.router, tags=["Webhooks"])

    # --- Core routers ---
    app.include_router(quotes.router, prefix="/api/v1", tags=["Quotes"])
    app.include_router(policies.router, prefix="/api/v1", tags=["Policies"])

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": f"{settings.brand_name} Quoting",
            "version": settings.api_version,
            "status": "operational",
            "docs": "/docs",
        }

    # Health check
    @app.get("/health")
    async def health():
        services = get_services()
        status = services.health()
        status["messenger_reachable"] = await services.check_messenger()
        return {
            "status": "healthy" if services.is_ready else "degraded",
            "services": status,
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
