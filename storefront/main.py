from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

import uvicorn

from storefront.config import Settings, get_settings
from storefront.database import StoreHandle, StoreUnavailableError
from storefront.bootstrap import DatabaseInitializer
from storefront.retry import RetryPolicy
from storefront.api import products, categories, health

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    settings = app.state.settings

    # Startup
    logger.info("Starting up application...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database URL: {'Set' if settings.DATABASE_URL else 'Not set'}")

    store = app.state.store
    await app.state.initializer.run()

    if store.available:
        logger.info("Database initialized successfully")
    else:
        logger.warning("Application will run in fallback mode")
    logger.info(f"Health check available at {settings.API_PREFIX}/health")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    store.dispose()


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Database not available"}
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[StoreHandle] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration to use (defaults to the environment)
        store: Pre-built store handle; built from settings if omitted

    Returns:
        Configured application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Storefront Demo API",
        description="""
    A small ecommerce backend used to compare hosting platforms:

    - **Products**: Read-only catalog with category filter and pagination
    - **Categories**: Distinct category labels
    - **Health**: Process health and database readiness

    ## Startup
    The products table is created and seeded with a sample catalog at startup,
    with a bounded number of attempts. When no database is configured, or it
    cannot be reached, the service still starts and data endpoints answer 503.
    """,
        version="1.0.0",
        lifespan=lifespan
    )
    if store is None:
        store = StoreHandle.from_settings(settings)

    # Health reporting works before, or without, the lifespan startup
    app.state.settings = settings
    app.state.store = store
    app.state.initializer = DatabaseInitializer(
        store,
        RetryPolicy(
            max_attempts=settings.DB_INIT_MAX_RETRIES,
            timeout=settings.DB_INIT_TIMEOUT,
            backoff=settings.DB_INIT_BACKOFF,
        ),
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include API routers
    app.include_router(health.router, prefix=settings.API_PREFIX)
    app.include_router(products.router, prefix=settings.API_PREFIX)
    app.include_router(categories.router, prefix=settings.API_PREFIX)

    @app.get("/", tags=["Root"])
    def root():
        """Root endpoint with API information."""
        return {
            "name": "Storefront Demo API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": f"{settings.API_PREFIX}/health"
        }

    return app


settings = get_settings()
configure_logging(settings)

# Served by `uvicorn storefront.main:app` and by the console script
app = create_app(settings)


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    logger.info("Starting server...")
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
