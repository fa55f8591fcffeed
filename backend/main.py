# ruff: noqa: E402
# E402 disabled: load_dotenv() must run before other imports for Sentry DSN

import os
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import sentry_sdk
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from core.correlation import (
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from core.logging_config import configure_logging
from core.sentry_config import init_sentry
from helpers.rate_limiter import limiter
from helpers.security_headers import SecurityHeadersMiddleware
from models.config import settings
from models.exceptions import (
    AuthenticationException,
    DomainException,
    NotFoundException,
    PermissionDeniedException,
    ValidationException,
)
from repositories.database import Base, engine
from routers import stats_router
from services.config_service import get_config, get_instance_name

# Initialize Sentry before app creation
init_sentry()

# Configure logging with Loguru
configure_logging(os.getenv("ENVIRONMENT", "development"))

# Latest alembic revision this code expects
EXPECTED_REVISION = "0001_initial"


def check_schema_version() -> None:
    """Warn when the database schema is not at the expected migration."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from repositories.database import SessionLocal

    db = SessionLocal()
    try:
        row = db.execute(
            text("SELECT version_num FROM alembic_version LIMIT 1")
        ).fetchone()
        if row is None:
            logger.warning(
                "No alembic_version found. Database may not be initialized with migrations."
            )
        elif row[0] != EXPECTED_REVISION:
            logger.warning(
                f"Database schema mismatch! "
                f"Current: {row[0]}, Expected: {EXPECTED_REVISION}. "
                f"Run 'alembic upgrade head' to update the database schema."
            )
        else:
            logger.info(f"Database schema version: {row[0]} (up to date)")
    except SQLAlchemyError as e:
        logger.warning(f"Could not verify schema version: {e!r}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    - Make sure the SQLite data directory exists.
    - Optionally create tables when `AUTO_CREATE_DB` is enabled (development).
    - Verify the database schema version.
    """
    if settings.DATABASE_URL.startswith("sqlite:///./"):
        Path("data").mkdir(parents=True, exist_ok=True)

    if settings.AUTO_CREATE_DB:
        logger.info(
            "AUTO_CREATE_DB enabled; creating database tables via SQLAlchemy create_all()"
        )
        Base.metadata.create_all(bind=engine)
    else:
        logger.info("AUTO_CREATE_DB disabled; skipping automatic create_all()")
        check_schema_version()

    yield


def _get_api_title() -> str:
    """Get API title from platform configuration."""
    config = get_config()
    instance_name = get_instance_name(config.localization.default_locale)
    return f"{instance_name} Stats API"


app = FastAPI(title=_get_api_title(), lifespan=lifespan)

# Attach rate limiter to app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Inject correlation ID into request context and Sentry."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request with correlation ID tracking."""
        correlation_id = (
            request.headers.get("X-Correlation-ID") or generate_correlation_id()
        )
        set_correlation_id(correlation_id)

        sentry_sdk.set_tag("correlation_id", correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all incoming requests with performance monitoring."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log timing information."""
        start_time = time.perf_counter()

        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.perf_counter() - start_time

        logger.info(
            f"Response: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )

        # Grouping large idea sets or building spreadsheets can be slow
        if duration > settings.SLOW_REQUEST_THRESHOLD:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration:.2f}s (threshold: {settings.SLOW_REQUEST_THRESHOLD}s)"
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        return response


# Middleware runs in reverse order - security headers should wrap everything
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# In development, allow all origins
cors_origins = ["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=settings.ENVIRONMENT != "development",
    allow_methods=["GET"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Correlation-ID"],
)


def _error_response(
    status_code: int, exc: DomainException, **extra_content: str
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            **extra_content,
            "correlation_id": exc.correlation_id,
        },
    )


# Global unhandled exception handler (returns generic 500 and logs details)
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch all unhandled exceptions with full Sentry capture."""
    correlation_id = get_correlation_id() or generate_correlation_id()

    sentry_sdk.set_tag("correlation_id", correlation_id)
    sentry_sdk.capture_exception(exc)

    # repr() keeps curly braces in the message away from loguru's formatter
    logger.exception(
        f"Unhandled exception: {exc!r}",
        correlation_id=correlation_id,
        path=str(request.url.path),
        method=request.method,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "correlation_id": correlation_id,
        },
    )


# Centralized exception handlers
@app.exception_handler(NotFoundException)
async def not_found_exception_handler(
    request: Request, exc: NotFoundException
) -> JSONResponse:
    """Handle not found exceptions with Sentry integration."""
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)

    logger.warning(
        f"Not found: {exc.message}",
        correlation_id=exc.correlation_id,
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return _error_response(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(ValidationException)
async def validation_exception_handler(
    request: Request, exc: ValidationException
) -> JSONResponse:
    """Handle rejected stats queries (bad interval, empty export window)."""
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)

    logger.warning(
        f"Validation error: {exc.message}",
        correlation_id=exc.correlation_id,
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return _error_response(
        status.HTTP_422_UNPROCESSABLE_CONTENT, exc, type=exc.__class__.__name__
    )


@app.exception_handler(PermissionDeniedException)
async def permission_denied_exception_handler(
    request: Request, exc: PermissionDeniedException
) -> JSONResponse:
    """Handle permission denied exceptions with Sentry integration."""
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)

    logger.warning(
        f"Permission denied: {exc.message}",
        correlation_id=exc.correlation_id,
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return _error_response(status.HTTP_403_FORBIDDEN, exc)


@app.exception_handler(AuthenticationException)
async def authentication_exception_handler(
    request: Request, exc: AuthenticationException
) -> JSONResponse:
    """Handle authentication exceptions with Sentry integration."""
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)

    # Auth failures are security-relevant, capture in Sentry
    sentry_sdk.capture_exception(exc)

    logger.warning(
        f"Authentication failed: {exc.message}",
        correlation_id=exc.correlation_id,
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    response = _error_response(status.HTTP_401_UNAUTHORIZED, exc)
    response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.exception_handler(DomainException)
async def domain_exception_handler(
    request: Request, exc: DomainException
) -> JSONResponse:
    """Handle generic domain exceptions with Sentry integration."""
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)

    sentry_sdk.capture_exception(exc)

    logger.warning(
        f"Domain exception: {exc.message}",
        correlation_id=exc.correlation_id,
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return _error_response(
        status.HTTP_400_BAD_REQUEST, exc, type=exc.__class__.__name__
    )


app.include_router(stats_router.router, prefix="/api")


@app.get("/")
def root() -> dict:
    """Root endpoint with instance-aware message."""
    config = get_config()
    return {
        "message": f"Welcome to {_get_api_title()}",
        "platform": config.platform.name,
        "version": config.platform.version,
    }


@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}
