"""FastAPI application entry point.

This module defines the application factory with CORS middleware,
lifespan management, exception handlers and API routing configuration.

Logging:
    Initializes structured logging when the application is created.
    All application events are logged with appropriate context.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workout_tracker.api import router as api_router
from workout_tracker.api.exception_handlers import register_exception_handlers
from workout_tracker.core.config import Settings, get_settings
from workout_tracker.core.logging import get_logger, setup_logging
from workout_tracker.db.session import create_engine, create_session_factory
from workout_tracker.models import Base

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context manager.

    Creates the engine and session factory on startup (and the tables, when
    DATABASE_CREATE_TABLES is set) and disposes of the connection pool on
    shutdown.

    Logging:
        Logs application startup and shutdown events with configuration details.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(
        f"Starting {settings.PROJECT_NAME}",
        extra={
            "context": {
                "action": "application_startup",
                "version": settings.VERSION,
                "debug": settings.DEBUG,
                "log_level": settings.LOG_LEVEL,
            }
        },
    )

    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    if settings.DATABASE_CREATE_TABLES:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    logger.info(
        "Application startup completed",
        extra={"context": {"action": "application_startup", "status": "success"}},
    )

    yield

    # Shutdown
    logger.info(
        f"Shutting down {settings.PROJECT_NAME}",
        extra={"context": {"action": "application_shutdown"}},
    )

    await engine.dispose()

    logger.info(
        "Application shutdown completed",
        extra={"context": {"action": "application_shutdown", "status": "success"}},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to run with; read from the environment if omitted

    Returns:
        The configured application. The settings object is kept on
        ``app.state.settings`` for dependencies.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Multi-user workout logging and search",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint.

        Returns a simple status indicating the service is running.
        """
        return {"status": "healthy"}

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """Root endpoint.

        Returns basic API information.
        """
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": "/docs",
        }

    return app


app = create_app()
