"""
Termbook Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn termbook.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌──────────┐ │
    │  │ Req ID   │→│  Logging    │→│ GZip │→│  CORS    │ │
    │  └──────────┘ └─────────────┘ └──────┘ └──────────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /definitions │ │ /dashboard   │ │ /health     │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→422 │ Auth→401/403 │ 404 │ DB→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from termbook import __version__
from termbook.config import settings
from termbook.database import dispose_engine
from termbook.exceptions import AuthenticationError, TermbookError
from termbook.middleware.logging import RequestLoggingMiddleware
from termbook.middleware.request_id import RequestIDMiddleware, request_id_var
from termbook.routes import dashboard, definitions, health
from termbook.schemas.definition import ErrorResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before any other initialization.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  configure logging, report configuration problems.
    Shutdown: dispose the database engine.
    """
    setup_logging()
    logger.info("Termbook backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: anonymous routes and /health still work, and the
        # problem stays visible in the logs.
        logger.error("Configuration error: %s", str(e))

    logger.info(
        "Edit policy: %s, delete requires auth: %s",
        settings.definition_edit_policy,
        settings.delete_requires_auth,
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Termbook backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    code: int,
    status: str,
    message: Optional[str] = None,
    messages: Optional[Dict[str, List[Dict[str, str]]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(code=code, status=status, message=message, messages=messages)
    return JSONResponse(
        status_code=code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _validation_messages(exc: RequestValidationError) -> Dict[str, List[Dict[str, str]]]:
    """Flatten pydantic errors to `{errors: [{field, rule, message}]}`."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(location) or "body",
            "rule": str(error.get("type", "invalid")),
            "message": str(error.get("msg", "Invalid value")),
        })
    return {"errors": errors}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions onto the response envelope.

        ValidationError         → 422  Error
        RequestValidationError  → 422  Error (field-level messages)
        AuthenticationError     → 401  Unauthorized
        PermissionDeniedError   → 403  Forbidden
        NotFoundError           → 404  Not Found
        DatabaseError           → 500  Error (generic message)
        HTTPException           → its own status
        Exception (fallback)    → 500  Error (generic message)

    5xx responses never carry internal details; those are logged server-side
    together with the request id.
    """

    @app.exception_handler(TermbookError)
    async def handle_termbook_error(request: Request, exc: TermbookError):
        rid = request_id_var.get("")
        if exc.code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            return _error_response(exc.code, exc.status, GENERIC_ERROR_MESSAGE)

        logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        messages = getattr(exc, "messages", None)
        if messages is not None:
            return _error_response(exc.code, exc.status, messages=messages, headers=headers)
        return _error_response(exc.code, exc.status, exc.message, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        messages = _validation_messages(exc)
        logger.warning("[%s] Request validation failed: %s", rid, messages["errors"])
        return _error_response(422, "Error", messages=messages)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        status = "Not Found" if exc.status_code == 404 else "Error"
        message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
        return _error_response(exc.status_code, status, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_response(500, "Error", GENERIC_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Termbook API",
        description=(
            "Crowd-sourced term dictionary. Submit definitions, follow their "
            "moderation status and search approved entries."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(definitions.router)
    app.include_router(dashboard.router)
    app.include_router(health.router)

    return app


app = create_app()
