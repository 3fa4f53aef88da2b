import platform
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from storefront.config import Settings, get_settings
from storefront.database import StoreHandle, get_store
from storefront.schemas.health import FallbackResponse, HealthResponse, InitializationStatus

router = APIRouter(tags=["Health"])


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the application was built with."""
    return getattr(request.app.state, "settings", None) or get_settings()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Report process health and whether the database is usable."
)
def health_check(
    request: Request,
    store: StoreHandle = Depends(get_store),
    settings: Settings = Depends(get_app_settings)
):
    """
    Health report for external monitoring.

    Always answers 200 while the process is up; the ``database`` field tells
    whether data endpoints will work.
    """
    initializer = request.app.state.initializer

    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        platform=settings.PLATFORM,
        database="connected" if store.available else "disconnected",
        initialization=InitializationStatus(
            state=initializer.state.value,
            attempts=initializer.attempts
        ),
        port=settings.PORT,
        python_version=platform.python_version(),
        environment=settings.ENVIRONMENT
    )


@router.get(
    "/fallback",
    response_model=FallbackResponse,
    summary="Fallback report",
    description="Static answer served while the database is unavailable."
)
def fallback(settings: Settings = Depends(get_app_settings)):
    """Fallback endpoint used when the database is not available."""
    return FallbackResponse(
        message="Application is running but database is not available",
        status="partial",
        timestamp=datetime.now(timezone.utc),
        platform=settings.PLATFORM
    )
