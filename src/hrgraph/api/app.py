"""
Main FastAPI application for the hrgraph backend
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Settings, get_settings
from ..database.connection import init_database, test_database_connection
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..services import Services, build_services

logger = get_logger(__name__)


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting hrgraph API...", environment=settings.environment)

        success, error_message = await test_database_connection()
        if success:
            logger.info("Database connection validation successful")
        else:
            logger.error("Database connection validation failed", error=error_message)

        yield

        logger.info("Shutting down hrgraph API...")
        await app.state.services.aclose()

    return lifespan


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Services are built here, once, so missing configuration stops startup
    instead of failing individual requests.
    """
    settings = settings or get_settings()
    configure_logging(debug=settings.debug, log_level=settings.log_level)

    if services is None:
        init_database(settings.database_url)
        services = build_services(settings)

    app = FastAPI(
        title="hrgraph API",
        description="Accounts and employee records over GraphQL",
        version=__version__,
        lifespan=_lifespan(settings),
        debug=settings.debug,
    )
    app.state.services = services

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    from ..graphql.schema import create_graphql_router, validate_schema

    logger.info("Validating GraphQL schema...")
    validate_schema()
    app.include_router(create_graphql_router(services), prefix="")
    logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")

    return app
