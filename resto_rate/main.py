"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from resto_rate.api import auth, categories, restaurants, reviews, users
from resto_rate.config import Settings, get_settings
from resto_rate.database import Database
from resto_rate.exceptions import AppError, UpstreamAuthError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts on every location
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, UpstreamAuthError):
        logger.error(
            f"Upstream auth failure on {request.url.path}: "
            f"status={exc.upstream_status} body={exc.upstream_body!r}"
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "kind": exc.kind},
        headers=exc.headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": _field_name(tuple(error.get("loc", ()))), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request data", "details": details},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use instead of the environment
        database: Database to use instead of one built from settings

    Returns:
        The configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application startup and shutdown events."""
        configure_logging(settings.log_level)
        app.state.database = database or Database.from_settings(settings)
        logger.info(f"Starting Resto Rate API ({settings.environment})")
        yield
        logger.info("Shutting down Resto Rate API")
        app.state.database.close()

    app = FastAPI(
        title="Resto Rate API",
        description="Restaurant listings, reviews and ratings",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Session-Id"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Register routers
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(restaurants.router)
    app.include_router(reviews.router)
    app.include_router(categories.router)

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        connected = request.app.state.database.ping()
        return {
            "status": "healthy" if connected else "degraded",
            "timestamp": datetime.now(UTC).isoformat(),
            "environment": settings.environment,
            "database": {"connected": connected},
        }

    return app


app = create_app()
