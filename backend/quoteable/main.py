"""
So Quoteable Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
Who:   uvicorn (uvicorn quoteable.main:app) and the test suite.

Application Architecture:
    Middleware:   Rate Limit → Request ID → Access Log → CORS / GZip
    Routes:       /api/people, /api/quotes, /api/images, /api/generated-images,
                  /api/transformations/url, /api/quote-cards, /health
    Errors:       QuoteableError subclasses → JSON ErrorResponse (see below)

Lifecycle:
    Startup:  logging, configuration check (logged, never fatal)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from quoteable import __version__
from quoteable.config import settings
from quoteable.database import dispose_engine
from quoteable.exceptions import (
    CircuitBreakerOpenError,
    DatabaseError,
    ImageServiceError,
    NotFoundError,
    QuoteableError,
    RateLimitExceededError,
    TransformationError,
    ValidationError,
)
from quoteable.middleware.logging import RequestLoggingMiddleware
from quoteable.middleware.rate_limit import RateLimitMiddleware
from quoteable.middleware.request_id import RequestIDMiddleware, request_id_var
from quoteable.routes import health, images, people, quotes, transformations

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """
    Configure the root logger: one line per record on stdout.

    Format: 2025-01-15T12:00:00 [INFO] quoteable.services.person_service: Person created: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's; the rest are chatty at INFO
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "urllib3", "httpcore", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("So Quoteable backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Browsing and URL building still work without Cloudinary credentials
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("So Quoteable backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "details": details or None,
            "request_id": request_id_var.get(""),
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map domain exceptions to HTTP responses.

        TransformationError     → 400 invalid_transformation
        ValidationError         → 400 validation_error
        NotFoundError           → 404 not_found
        RateLimitExceededError  → 429 rate_limit_exceeded (Retry-After)
        CircuitBreakerOpenError → 503 service_unavailable (Retry-After)
        ImageServiceError       → 503 image_service_error
        DatabaseError           → 500 server_error (generic message)
        QuoteableError / other  → 500 server_error

    Internal details (SQL, stack traces) are logged, never returned.
    """

    @app.exception_handler(TransformationError)
    async def handle_transformation_error(request: Request, exc: TransformationError):
        logger.info("[%s] Invalid transformation: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "invalid_transformation", exc.message, exc.context)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return _error_response(
            429, "rate_limit_exceeded", exc.message, exc.context,
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(CircuitBreakerOpenError)
    async def handle_circuit_breaker(request: Request, exc: CircuitBreakerOpenError):
        logger.warning("[%s] Circuit breaker open: %s", request_id_var.get(""), exc.message)
        return _error_response(
            503, "service_unavailable", exc.message,
            {"recovery_time": exc.recovery_time},
            headers={"Retry-After": str(exc.recovery_time)},
        )

    @app.exception_handler(ImageServiceError)
    async def handle_image_service_error(request: Request, exc: ImageServiceError):
        logger.error("[%s] Image service error: %s", request_id_var.get(""), exc.message)
        headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after else None
        return _error_response(503, "image_service_error", exc.message, exc.context, headers=headers)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(QuoteableError)
    async def handle_quoteable_error(request: Request, exc: QuoteableError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s: %s",
            request_id_var.get(""), type(exc).__name__, str(exc),
            exc_info=True,
        )
        return _error_response(500, "server_error", "An unexpected error occurred. Please try again later.")


def create_app() -> FastAPI:
    app = FastAPI(
        title="So Quoteable API",
        description=(
            "Quotes, the people who said them, and Cloudinary-rendered quote cards. "
            "Card URLs are compiled from ordered transformation directives."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Added last = runs first: RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(people.router)
    app.include_router(quotes.router)
    app.include_router(images.router)
    app.include_router(transformations.router)
    app.include_router(health.router)

    return app


app = create_app()
