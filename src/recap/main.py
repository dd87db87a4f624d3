"""FastAPI application factory.

Creates the app with logging middleware, metrics middleware, CORS, Sentry,
error handlers for the recap error taxonomy, and the v1 API router.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse, Response

from src.recap.config import get_settings
from src.recap.core.monitoring import MetricsMiddleware, get_metrics_response, init_sentry
from src.recap.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.recap.api.v1.router import router as v1_router
from src.recap.errors import RecapError

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging and Sentry on startup."""
    settings = get_settings()
    configure_structlog()

    if settings.SENTRY_DSN:
        init_sentry(dsn=settings.SENTRY_DSN, environment=settings.ENVIRONMENT.value)

    if not settings.remote_configured:
        # Not fatal at startup: /recap answers with a ConfigurationError.
        logger.warning("startup.remote_not_configured")

    logger.info("startup.complete", environment=settings.ENVIRONMENT.value)
    yield
    logger.info("shutdown.complete")


async def recap_error_handler(request: Request, exc: RecapError) -> JSONResponse:
    """Render a pipeline failure as ``{"error": ...}`` with its status."""
    log_method = logger.warning if exc.status_code < 500 else logger.error
    log_method(
        "recap.request_failed",
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject undecodable or mistyped bodies with 400 instead of 422."""
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        message = "Invalid JSON"
    else:
        message = "Invalid request body"
    logger.warning("recap.request_rejected", error=message, error_count=len(errors))
    return JSONResponse(status_code=400, content={"error": message})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Meeting Recap API",
        version="0.1.0",
        description="Turns meeting transcripts into structured notes and an optional audio recap",
        lifespan=lifespan,
    )
    app.state.recap_pipeline = None

    app.add_exception_handler(RecapError, recap_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Middleware is added in reverse order (last added = outermost)

    if settings.CORS_ALLOWED_ORIGINS == "*":
        origins = ["*"]
    else:
        origins = [o.strip() for o in settings.CORS_ALLOWED_ORIGINS.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    # Metrics middleware (outermost -- records Prometheus metrics for all requests)
    app.add_middleware(MetricsMiddleware)

    app.include_router(v1_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()
