"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routes import applications, health, leases, managers, properties, tenants
from app.core.config import settings
from app.core.database import init_db
from app.core.exceptions import register_exception_handlers
from app.core.logging import get_logger, setup_logging

# Import models for Base.metadata.create_all - order matters for foreign keys
from app.models import (
    associations,  # noqa: F401
    location,  # noqa: F401
    manager,  # noqa: F401
    tenant,  # noqa: F401
    property,  # noqa: F401
    lease,  # noqa: F401
    application,  # noqa: F401
)
from app.services.geocoding import Geocoder
from app.services.storage import PhotoStorage

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    # Startup: logging, tables and the external clients
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    init_db()
    app.state.photo_storage = PhotoStorage(settings.S3_BUCKET_NAME, settings.AWS_REGION)
    app.state.geocoder = Geocoder(
        settings.GEOCODING_URL,
        settings.GEOCODING_USER_AGENT,
        timeout=settings.GEOCODING_TIMEOUT_SECONDS,
    )
    if not settings.JWT_JWKS_URL:
        logger.warning("JWT_JWKS_URL is not set; bearer token signatures are not verified")
    logger.info("%s %s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    # Shutdown: release client connections
    app.state.geocoder.close()
    app.state.photo_storage.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Rental listings, applications and leases",
    lifespan=lifespan,
)

register_exception_handlers(app)

# Include API routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(properties.router, prefix="/api")
app.include_router(applications.router, prefix="/api")
app.include_router(leases.router, prefix="/api")
app.include_router(managers.router, prefix="/api")
app.include_router(tenants.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
