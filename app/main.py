"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.
It wires storage and services, sets up routes, middleware and exception handlers.

Design Decisions:
- Use lifespan events for startup/shutdown
- Services are built once per application and reached through app.state
- Storage can be injected, so tests run against fresh in-memory directories
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.api import register_exception_handlers
from app.api import router as api_router
from app.config import Settings, get_settings
from app.logging_config import get_logger, setup_logging
from app.services import build_services
from app.services.base import Clock, utc_now
from app.storage import Storage, create_storage

# Initialize logging first
setup_logging()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Prepares the storage backend on startup.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Starting PR Reviewer Assignment Service",
        host=settings.host,
        port=settings.port,
        storage_backend=settings.storage_backend
    )

    try:
        await app.state.storage.initialize()
    except Exception as e:
        logger.error("Storage initialization failed", error=str(e))
        raise

    yield

    logger.info("Shutting down PR Reviewer Assignment Service")


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    clock: Clock = utc_now
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use, defaults to the environment
        storage: Directories to use, defaults to the configured backend
        clock: Source of the current UTC time for the services

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    storage = storage or create_storage(settings)

    app = FastAPI(
        title="PR Reviewer Assignment Service",
        description="Assigns reviewers to pull requests and tracks their lifecycle",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.services = build_services(storage, clock=clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """Root endpoint with basic info."""
        return {
            "name": "PR Reviewer Assignment Service",
            "version": __version__,
            "status": "running",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint.

        Returns basic health status for load balancers and monitors.
        """
        return {
            "status": "healthy",
            "service": "pr-reviewer-assignment",
            "version": __version__
        }

    return app


# Create the application instance
app = create_app()
