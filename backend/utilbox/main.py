"""
Utilbox Backend: FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (`uvicorn utilbox.main:app`) or the `utilbox` script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌────────────┐  │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│    CORS    │  │
    │  └──────────┘ └──────────┘ └──────┘ └────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  POST /api/greeting   POST /api/login               │
    │  POST /api/hash       POST /api/calculate           │
    │  GET  /health                                       │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400  AuthenticationError→401       │
    │  CredentialStoreError→503  Exception→500            │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup (runs to completion before uvicorn accepts connections):
    1. Initialize logging
    2. Load the credential table into an immutable CredentialStore
       (any failure is logged and re-raised: the process exits)
    3. Publish the store on app.state for the get_credential_store dependency

    Shutdown:
    1. Release the store and log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utilbox import __version__
from utilbox.config import settings
from utilbox.exceptions import (
    AuthenticationError,
    CredentialStoreError,
    ValidationError,
)
from utilbox.middleware.logging import RequestLoggingMiddleware
from utilbox.middleware.request_id import RequestIDMiddleware, request_id_var
from utilbox.routes import auth, calculate, digest, greeting, health
from utilbox.schemas.api import ErrorResponse
from utilbox.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before the credential store is loaded.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # utilbox.access already logs every request with duration and request ID
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Load the credential store before serving; release it on shutdown.

    Uvicorn completes this startup phase before it begins accepting
    connections, and aborts the process if it raises. A missing or malformed
    credential file therefore never yields a listening server.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Utilbox Backend %s starting up...", __version__)

    try:
        store = await CredentialStore.load(settings.credentials_path)
    except CredentialStoreError as e:
        logger.error("Startup failed: %s", e.message)
        logger.error("Fix CREDENTIALS_PATH (%s) and restart the server.", settings.credentials_path)
        raise

    app.state.credential_store = store
    logger.info("Credential store ready: %d users loaded", len(store))
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Utilbox Backend shutting down...")
    app.state.credential_store = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error, request_id=request_id_var.get("") or None)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the error envelope.

    Handler table:
        ValidationError            → 400 validation_error
        RequestValidationError     → 400 validation_error (bad JSON / body shape)
        AuthenticationError        → 401 authentication_failed
        StarletteHTTPException     → exc.status_code http_error (404, 405, ...)
        CredentialStoreError       → 503 service_unavailable
        Exception (fallback)       → 500 internal_server_error

    Responses never include stack traces or exception context; those are
    logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(err.get("type") == "json_invalid" for err in errors):
            message = "Malformed JSON request body"
        else:
            message = "Invalid request body"
        # Type and location only: the rejected input may be a password
        summary = [(err.get("type"), err.get("loc")) for err in errors]
        logger.warning("[%s] %s: %s", request_id_var.get(""), message, summary)
        return _error_response(400, "validation_error", message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(401, "authentication_failed", exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _error_response(
            exc.status_code,
            "http_error",
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(CredentialStoreError)
    async def handle_credential_store_error(request: Request, exc: CredentialStoreError):
        logger.error("[%s] Credential store error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(503, "service_unavailable", "Service is not ready. Please try again later.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns a fresh instance on every call; tests build their own instead of
    sharing the module-level `app`.
    """
    app = FastAPI(
        title="Utilbox API",
        description=(
            "Greeting echo, credential check, SHA-256 digest and four-function "
            "calculator behind a uniform {success, message} JSON envelope."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods_list,
        allow_headers=settings.cors_allow_headers_list,
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(greeting.router)
    app.include_router(auth.router)
    app.include_router(digest.router)
    app.include_router(calculate.router)
    app.include_router(health.router)

    return app


# uvicorn expects `utilbox.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entrypoint: serve the app on settings.host:settings.port."""
    uvicorn.run(
        "utilbox.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
