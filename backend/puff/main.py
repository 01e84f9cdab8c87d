"""
Puff Backend: FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       lifespan() runs the startup checks and closes the engine on shutdown.
Who:   uvicorn (`uvicorn puff.main:app`) and the test suite.

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate security settings (logged, not fatal)
    3. Wait for the database with backoff (logged, not fatal: /health
       reports it as disconnected)
    4. Create missing tables when DB_AUTO_CREATE_TABLES is on

    Shutdown:
    1. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from puff import __version__
from puff.config import settings
from puff.database import dispose_engine, init_models, wait_for_database
from puff.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    PuffError,
    RateLimitExceededError,
    ValidationError,
)
from puff.middleware.logging import RequestLoggingMiddleware
from puff.middleware.rate_limit import RateLimitMiddleware
from puff.middleware.request_id import RequestIDMiddleware, request_id_var
from puff.routes import (
    auth,
    catalog,
    health,
    insights,
    medical,
    recommendations,
    sessions,
    strains,
    tolerance,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2025-03-05T12:00:00 [INFO] puff.services.strain_service: message
    Every module logs through logging.getLogger(__name__).
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Chatty at INFO; our own access log replaces uvicorn's
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "httpcore", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("Puff Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    try:
        await wait_for_database()
        if settings.db_auto_create_tables:
            await init_models()
            logger.info("Database tables verified")
    except (OSError, SQLAlchemyError) as e:
        # Keep serving: /health reports the outage and requests fail with 500
        logger.error("Database unavailable at startup: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Puff Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    """ErrorResponse payload with the current request ID."""
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the PuffError hierarchy onto HTTP responses.

        RequestValidationError  → 422 (schema errors, one entry per field)
        ValidationError         → 400
        AuthenticationError     → 401 (+ WWW-Authenticate: Bearer)
        NotFoundError           → 404
        ConflictError           → 409
        RateLimitExceededError  → 429 (+ Retry-After)
        DatabaseError           → 500, generic message
        PuffError / Exception   → 500, generic message

    Stack traces and database details are logged, never returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        logger.info("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return JSONResponse(
            status_code=422,
            content=error_body("validation_error", "Request validation failed", {"errors": errors}),
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content=error_body("unauthorized", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=error_body("not_found", exc.message))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(
            status_code=409,
            content=error_body("conflict", exc.message, exc.context),
        )

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return JSONResponse(
            status_code=429,
            content=error_body("rate_limit_exceeded", exc.message, exc.context),
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(PuffError)
    async def handle_puff_error(request: Request, exc: PuffError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Puff API",
        description=(
            "Personal cannabis diary: strain collection, consumption sessions, "
            "vibe-based recommendations, usage insights, symptom tracking and "
            "tolerance breaks."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware runs in reverse order of addition:
    # RequestID → Logging → RateLimit → GZip → CORS → route
    # RequestID is outermost so 429s and access log lines carry the ID
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(catalog.router)
    app.include_router(auth.router)
    app.include_router(strains.router)
    app.include_router(sessions.router)
    app.include_router(recommendations.router)
    app.include_router(insights.router)
    app.include_router(medical.router)
    app.include_router(tolerance.router)

    return app


app = create_app()
