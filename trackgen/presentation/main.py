import os
import logging
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, APIRouter
from fastapi.exceptions import RequestValidationError
import uvicorn
from contextlib import asynccontextmanager

from trackgen.core.config import settings
from trackgen.core.exceptions import (
    ShipmentValidationError,
    TrackingNumberGenerationError,
    general_exception_handler,
    generation_exception_handler,
    shipment_validation_exception_handler,
    validation_exception_handler,
)
from trackgen.core.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
)
from trackgen.presentation.api.v1.dependencies.tracking import get_tracking_adapters
from trackgen.presentation.api.v1.routers import tracking
from trackgen.presentation.api.v1.routers import health


def configure_logging() -> None:
    """Console logging plus an optional rotating log file."""
    log_handlers = [logging.StreamHandler()]
    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        log_handlers.append(
            RotatingFileHandler(
                settings.log_file,
                maxBytes=settings.log_file_max_bytes,
                backupCount=settings.log_file_backup_count,
                encoding="utf-8",
            )
        )
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format=settings.log_format,
        datefmt=settings.log_date_format,
        handlers=log_handlers,
    )


configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info(
        "Starting %s (store_backend=%s, max_attempts=%d)...",
        settings.api_title,
        settings.store_backend,
        settings.max_generation_attempts,
    )
    # Open the store up front so a broken database fails at start-up
    get_tracking_adapters()
    yield
    logger.info("Shutting down %s...", settings.api_title)


def create_application() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        calls=settings.rate_limit_calls,
        period=settings.rate_limit_period,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(
        ShipmentValidationError, shipment_validation_exception_handler
    )
    app.add_exception_handler(
        TrackingNumberGenerationError, generation_exception_handler
    )
    app.add_exception_handler(Exception, general_exception_handler)

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(tracking.router)
    api_v1.include_router(health.router)
    app.include_router(api_v1)

    return app


# Create application instance
app = create_application()

if __name__ == "__main__":
    dev_mode = os.getenv("DEV_MODE", "false").lower() == "true"
    uvicorn.run(
        "trackgen.presentation.main:app",
        host=settings.host,
        port=settings.port,
        reload=dev_mode,
    )
