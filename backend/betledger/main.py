"""
Main FastAPI application entry point for the betting ledger.

This is the core application file that:
- Initializes FastAPI with lifespan management
- Configures CORS for frontend integration
- Sets up logging and Logfire observability
- Maps ledger rejections to HTTP responses
- Provides health check endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from betledger import __version__
from betledger.api.errors import register_error_handlers
from betledger.api.routes import admin_router, bets_router, events_router, users_router
from betledger.config import settings
from betledger.database import (
    check_db_connection,
    close_db,
    get_db_info,
    get_db_session,
    init_db,
)
from betledger.observability import configure_logging, initialize_logfire
from betledger.services import settlement_service, user_service

logger = logging.getLogger(__name__)


async def bootstrap() -> None:
    """Create the configured admin and finish any interrupted settlements."""
    async with get_db_session() as db:
        if settings.admin_username and settings.admin_password:
            await user_service.ensure_admin(
                db, settings.admin_username, settings.admin_password
            )

        results = await settlement_service.settle_closed_events(db)
        for result in results:
            logger.info(
                f"Recovered settlement for event {result.event_id}: "
                f"{result.processed_count} bets processed"
            )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(f"Starting betledger API ({settings.environment})")

    await init_db()

    db_info = get_db_info()
    if await check_db_connection():
        logger.info(f"Database connection successful: {db_info['url']}")
        await bootstrap()
    else:
        logger.error(f"Database connection failed: {db_info['url']}")

    logger.info("betledger API startup complete")

    yield

    logger.info("Shutting down betledger API")
    await close_db()


def create_app() -> FastAPI:
    configure_logging(settings)

    app = FastAPI(
        title="Betledger API",
        description="Sports betting ledger with settlement and balance tracking",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
        docs_url=None if settings.is_production else "/docs",
    )

    initialize_logfire(settings, app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(users_router)
    app.include_router(events_router)
    app.include_router(bets_router)
    app.include_router(admin_router)

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, str]:
        """
        Health check endpoint for load balancers and monitoring.

        Returns:
            dict: Health status of the application and database
        """
        db_connected = await check_db_connection()

        return {
            "status": "healthy" if db_connected else "degraded",
            "service": "betledger-api",
            "version": __version__,
            "database": "connected" if db_connected else "disconnected",
            "environment": settings.environment,
        }

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, str]:
        """API information."""
        return {
            "name": "Betledger API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "betledger.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
