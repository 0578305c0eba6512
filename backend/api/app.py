"""
FastAPI application factory.

Creates and configures the FastAPI application instance, including the
exception handlers that turn every failure into a `{message, error}` body.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.config import get_settings
from shared.exceptions import DashboardError, ExternalServiceError
from modules.auth.routes import router as auth_router

from .dependencies import get_container
from .models.errors import ErrorResponse
from .routes import health, users

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Set up root logging once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Opens the credential store and builds the token issuer at startup. A
    missing JWT secret raises ConfigurationError here, which aborts startup.
    """
    # Startup
    container = get_container()
    settings = container.settings
    configure_logging(settings.log_level)
    container.auth  # builds the token issuer; fails without JWT_SECRET
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    yield
    # Shutdown
    container.close()
    logger.info(f"Shutting down {settings.app_name}")


def _error_response(status_code: int, message: str, code: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, error=code).model_dump(),
    )


async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    """Render a domain error with its own status code and message."""
    if isinstance(exc, ExternalServiceError) or exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.to_dict()}")
        return _error_response(exc.status_code, "Server error, please try again later", exc.code)
    return _error_response(exc.status_code, exc.message, exc.code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body validation failures as 400 with the first problem as message."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        # Positions inside malformed JSON are ints, not field names
        field = ".".join(
            part for part in first.get("loc", ()) if isinstance(part, str) and part != "body"
        )
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error_response(400, message, "VALIDATION_ERROR")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep framework errors (404 route, 405 method) in the same body shape."""
    return _error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, return a generic message."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(500, "Server error, please try again later", "INTERNAL_ERROR")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Authentication backend for the privacy dashboard",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Error handlers
    app.add_exception_handler(DashboardError, dashboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(users.router, prefix="/api/user", tags=["users"])

    return app


# Application instance for uvicorn
app = create_app()
