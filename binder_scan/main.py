"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, maps domain
errors to JSON error responses and configures lifespan.

Dependencies: fastapi, binder_scan.api, binder_scan.observability, binder_scan.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from binder_scan.api import api_router
from binder_scan.api.deps import get_service_cache
from binder_scan.configs import get_settings
from binder_scan.core.exceptions import CardScanException
from binder_scan.models.common import ErrorResponse
from binder_scan.observability.logger import configure_logging
from binder_scan.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events. Shared clients are created lazily
    on first use and released on shutdown.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(
        f"Application startup: {settings.service_name} {settings.version} "
        f"vision={settings.vision.provider}/{settings.vision.model}"
    )

    yield

    # Shutdown
    await get_service_cache().aclose()
    logger.info("Application shutdown")


def _error_response(status_code: int, error: str, details: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def card_scan_exception_handler(request: Request, exc: CardScanException) -> JSONResponse:
    """Render domain errors with their own status code."""
    return _error_response(exc.status_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors in the error response schema."""
    if isinstance(exc.detail, str):
        return _error_response(exc.status_code, exc.detail)
    return _error_response(exc.status_code, "Request failed", {"errors": exc.detail})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed request bodies as 400."""
    logger.warning(f"Invalid request body: {request.method} {request.url.path}")
    return _error_response(400, "Invalid request", {"errors": jsonable_encoder(exc.errors())})


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Binder Scan API",
        description="Identifies Pokémon cards in binder page photos and prices them",
        version=settings.version,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CardScanException, card_scan_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register API routes
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "binder_scan.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.debug,
    )
