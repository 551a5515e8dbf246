"""SellIt Backend - FastAPI Application."""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sellit.boot import Bootloader, BootMode
from sellit.config import settings
from sellit.database import Database
from sellit.logger import configure_logging, get_logger
from sellit.routers import auth, categories, products, test_utils
from sellit.services.categories import seed_default_categories
from sellit.services.email import Mailer, SmtpMailer

# Initialize logging early
configure_logging()
logger = get_logger(__name__)

APP_NAME = "SellIt API"
VALIDATION_FAILED = "Validation failed"
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _error_path(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def _error_message(msg: str) -> str:
    # pydantic prefixes messages raised from custom validators
    return msg.removeprefix("Value error, ")


def format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``{path, msg}`` pairs, one per problem."""
    return [
        {"path": _error_path(tuple(err.get("loc", ()))), "msg": _error_message(err.get("msg", ""))}
        for err in errors
    ]


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(list(exc.errors()))
    logger.info("Request validation failed", error_count=len(errors))
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"message": VALIDATION_FAILED, "errors": errors}),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; never exposes internal detail."""
    logger.error(
        "Unhandled exception",
        error_type=type(exc).__name__,
        error_module=type(exc).__module__,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


async def logging_middleware(request: Request, call_next: Any) -> Response:
    """Middleware to inject Request-ID and log request details."""
    request_id = request.headers.get("X-Request-ID", str(uuid4()))

    # structlog contextvars are isolated per async context; clear for a clean slate
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    start_time = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        duration = time.perf_counter() - start_time
        logger.exception(
            "HTTP Request Failed",
            duration_ms=round(duration * 1000, 2),
            error=str(exc),
        )
        raise

    duration = time.perf_counter() - start_time
    logger.info(
        "HTTP Request",
        status_code=response.status_code,
        duration_ms=round(duration * 1000, 2),
    )
    response.headers["X-Request-ID"] = request_id
    return response


def create_app(
    *,
    database: Database | None = None,
    mailer: Mailer | None = None,
    enable_test_utils: bool | None = None,
) -> FastAPI:
    """Build the application.

    An injected ``database`` or ``mailer`` is used as-is and left open on
    shutdown; otherwise both are created at startup from settings. The test
    utilities router is only assembled into the app when enabled.
    """
    test_utils_enabled = settings.enable_test_utils if enable_test_utils is None else enable_test_utils

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owns_database = getattr(app.state, "database", None) is None
        if owns_database:
            app.state.database = Database(settings.database_url, echo=settings.debug)
        if getattr(app.state, "mailer", None) is None:
            app.state.mailer = SmtpMailer(settings)

        # Exits the process if config or DB connectivity is broken
        await Bootloader.validate(
            mode=BootMode.CRITICAL,
            database=app.state.database,
            enable_test_utils=test_utils_enabled,
        )

        if settings.seed_default_categories:
            async with app.state.database.session_maker() as session:
                await seed_default_categories(session)

        logger.info("Application started", version=app.version, test_utils=test_utils_enabled)
        yield

        if owns_database:
            await app.state.database.dispose()
            app.state.database = None
        logger.info("Application shutting down")

    app = FastAPI(
        title=APP_NAME,
        description="Classifieds marketplace: accounts, categories, listings and favorites",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.mailer = mailer

    app.middleware("http")(logging_middleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # CORS for the single-page frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.include_router(auth.router)
    app.include_router(categories.router)
    app.include_router(products.router)
    if test_utils_enabled:
        app.include_router(test_utils.router)
        logger.warning("Test utilities router enabled")

    @app.get("/health")
    @app.get("/api/health")
    async def health_check() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok", "name": APP_NAME}

    return app


app = create_app()
