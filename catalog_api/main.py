"""Catalog API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, static files and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from catalog_api.api.health import router as health_router
from catalog_api.api.middleware import setup_middleware
from catalog_api.api.products import router as products_router
from catalog_api.catalog.images import create_image_source
from catalog_api.domain.exceptions import (
    DomainError,
    ProductNotFoundError,
    ProductValidationError,
    StorageError,
)
from catalog_api.infrastructure.config import ImageMode, settings
from catalog_api.infrastructure.database import create_tables, engine
from catalog_api.infrastructure.logging_config import configure_logging

configure_logging(settings)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting Catalog API",
        version=settings.api_version,
        debug=settings.debug,
        image_mode=settings.image_mode.value,
    )

    await create_tables()

    yield

    # Shutdown
    await engine.dispose()
    logger.info("Shutting down Catalog API")


app = FastAPI(
    title="Catalog API",
    description="Product catalog with image attachment",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# One image acquisition strategy per deployment
app.state.image_source = create_image_source(settings)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)


def mount_uploads(target: FastAPI, directory: str | Path, url_prefix: str) -> None:
    """Serve stored images from ``directory`` under ``url_prefix``."""
    target.mount(url_prefix, StaticFiles(directory=directory), name="uploads")


# Uploaded images are served back from the upload directory
if settings.image_mode == ImageMode.UPLOAD:
    mount_uploads(app, settings.upload_dir, settings.upload_url_prefix)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: list[dict] | None = None,
) -> JSONResponse:
    """Build an error response in the standard format."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": getattr(request.state, "request_id", None),
        },
    )


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Translate domain errors into HTTP responses."""
    if isinstance(exc, ProductValidationError):
        return error_response(
            request,
            422,
            "VALIDATION_ERROR",
            exc.message,
            [{"field": exc.field, "message": exc.details["reason"]}],
        )

    if isinstance(exc, ProductNotFoundError):
        return error_response(request, 404, "PRODUCT_NOT_FOUND", exc.message)

    if isinstance(exc, StorageError):
        # Cause was already logged where it was wrapped
        return error_response(request, 500, "STORAGE_ERROR", "A storage error occurred")

    logger.error("Unmapped domain error", error_type=type(exc).__name__, error=exc.message)
    return error_response(request, 500, "INTERNAL_ERROR", "An internal error occurred")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors with consistent format."""
    details = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return error_response(request, 422, "VALIDATION_ERROR", "Invalid request", details)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
    else:
        error_code = "ERROR"
        message = str(detail)

    return error_response(request, exc.status_code, error_code, message)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return error_response(request, 500, "INTERNAL_ERROR", "An internal error occurred")
