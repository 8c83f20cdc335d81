"""Catalog API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, exception handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.health import router as health_router
from app.api.middleware import setup_middleware
from app.api.products import router as products_router
from app.domain.exceptions import CatalogError
from app.infrastructure.config import settings
from app.infrastructure.database import engine
from app.infrastructure.logging import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    configure_logging(settings.log_level, debug=settings.debug)
    logger.info(
        "Starting Catalog API",
        version=settings.api_version,
        debug=settings.debug,
    )

    yield

    logger.info("Shutting down Catalog API")
    await engine.dispose()


app = FastAPI(
    title="Catalog API",
    description="Product catalog with images and attribute-described variants",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def _error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: list | dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details if details is not None else [],
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Translate catalog errors into the standard error body."""
    if exc.status_code >= 500:
        logger.error(
            "Catalog operation failed",
            path=request.url.path,
            method=request.method,
            error_code=exc.error_code,
            error=exc.message,
            cause=str(exc.__cause__) if exc.__cause__ else None,
        )

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return _error_response(
        request,
        exc.status_code,
        exc.error_code,
        exc.message,
        details=exc.details,
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures in the standard error body."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return _error_response(
        request,
        422,
        "VALIDATION_FAILED",
        "Request validation failed",
        details=details,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return _error_response(request, exc.status_code, error_code, message, details=details)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return _error_response(
        request,
        500,
        "INTERNAL_ERROR",
        "An internal error occurred",
    )
