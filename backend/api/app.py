"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import configure_logging, get_settings
from shared.database import close_connection_pool
from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ReelbaseError,
    ValidationError,
)
from modules.activity.routes import router as activity_router
from modules.admin.routes import router as admin_router
from modules.auth.routes import profile_router, router as auth_router
from modules.watchlist.routes import router as watchlist_router

from .dependencies import get_container
from .routes import health

logger = logging.getLogger(__name__)

# Checked in order; the first matching base wins
STATUS_BY_ERROR: list[tuple[type[ReelbaseError], int]] = [
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
    (ConflictError, 409),
]

INTERNAL_ERROR_BODY = {"error": "INTERNAL_ERROR", "message": "Internal server error"}


def status_for(exc: ReelbaseError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Configures logging and builds the auth stack for the process's mode
    before the first request; closes the connection pool on shutdown.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings)
    container = get_container()
    logger.info(
        f"Starting {settings.app_name} on {settings.host}:{settings.port} "
        f"(auth mode: {container.mode.value})"
    )
    auth = container.auth
    logger.info(f"Auth service ready: {type(auth.backend).__name__}")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")
    close_connection_pool()


async def handle_reelbase_error(request: Request, exc: ReelbaseError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.exception(f"{request.method} {request.url.path} failed: {exc.to_dict()}")
        return JSONResponse(status_code=status_code, content=INTERNAL_ERROR_BODY)

    logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc.to_dict()}")
    return JSONResponse(status_code=status_code, content=exc.to_response())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first validation problem as a 400 with a readable message."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        message = str(errors[0].get("msg", message)).removeprefix("Value error, ")
    logger.warning(f"{request.method} {request.url.path} -> 400: {message}")
    return JSONResponse(
        status_code=400,
        content={"error": "VALIDATION_ERROR", "message": message},
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} raised {type(exc).__name__}")
    return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Authentication, session and activity API for Reelbase",
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

    # Error mapping
    app.add_exception_handler(ReelbaseError, handle_reelbase_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(profile_router, prefix="/api/profile", tags=["profile"])
    app.include_router(watchlist_router, prefix="/api/watchlist", tags=["watchlist"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
    app.include_router(activity_router, prefix="/api/admin", tags=["admin"])

    return app


# Application instance for uvicorn
app = create_app()
