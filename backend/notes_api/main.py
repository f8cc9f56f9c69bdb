"""
Notes API: FastAPI Application Factory
======================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance;
       the lifespan builds the shared collaborators once per process.
Who:   Called by uvicorn (`uvicorn notes_api.main:app`) or the `notes-api`
       console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │   Req ID     │→│ Logging  │→│  CORS           │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────┐ ┌─────────┐ ┌─────────┐ ┌─────────┐  │
    │  │ GET/POST  │ │ GET     │ │ GET     │ │ GET     │  │
    │  │ /notes    │ │ /posts  │ │ /health │ │/db-check│  │
    │  └───────────┘ └─────────┘ └─────────┘ └─────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Storage→500 │ Upstream→500  │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Build the Database (connection pool) unless one was injected
    3. Optionally create missing tables (DB_CREATE_SCHEMA)
    4. Build the PostsClient unless one was injected

    Shutdown:
    1. Close the upstream HTTP client
    2. Dispose the database engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_api import __version__
from notes_api.config import Settings, settings as default_settings
from notes_api.database import Database
from notes_api.exceptions import (
    DatabaseUnavailableError,
    StorageError,
    UpstreamFetchError,
    ValidationError,
)
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.middleware.request_id import RequestIDMiddleware, request_id_var
from notes_api.routes import health, notes, posts
from notes_api.services.posts_client import PostsClient

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Per-operation DEBUG/INFO chatter from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the process-wide collaborators on startup and release them on
    shutdown. Collaborators already present on app.state (injected through
    create_app) are used as-is.
    """
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("Notes API %s starting up...", __version__)

    if app.state.database is None:
        app.state.database = Database.from_settings(config)
        logger.info(
            "Connection pool ready (size=%d, wait timeout=%.1fs)",
            config.db_pool_size,
            config.db_pool_timeout,
        )

    if config.db_create_schema:
        try:
            await app.state.database.create_schema()
        except Exception as e:
            # Keep serving: /health stays up and /db-check reports the cause
            logger.error("Could not create database schema: %s", str(e))

    if app.state.posts_client is None:
        app.state.posts_client = PostsClient.from_settings(config)

    logger.info("API running on http://%s:%d", config.host, config.port)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down...")
    await app.state.posts_client.aclose()
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and JSON bodies.

    Handler hierarchy:
        ValidationError           → 400 {"error": message}
        RequestValidationError    → 400 {"error": "Invalid JSON body"}
        HTTPException (framework) → status {"error": detail}; 400 is a body
                                    that could not be parsed
        DatabaseUnavailableError  → 500 {"error", "message", "code"}
        StorageError              → 500 {"error": message}
        UpstreamFetchError        → 500 {"error": message}
        Exception (fallback)      → 500 {"error": "Internal server error"}

    Only DatabaseUnavailableError (raised by /db-check) exposes driver
    detail; every other handler logs context server-side only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """The request body could not be decoded as JSON."""
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed request body: %s", rid, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """
        Errors raised by the framework itself: unknown path (404), wrong
        method (405), or a body FastAPI could not read at all (400).
        """
        rid = request_id_var.get("")
        logger.warning("[%s] HTTP %d: %s", rid, exc.status_code, exc.detail)
        error = "Invalid JSON body" if exc.status_code == 400 else exc.detail
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": error},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(DatabaseUnavailableError)
    async def handle_database_unavailable(request: Request, exc: DatabaseUnavailableError):
        rid = request_id_var.get("")
        logger.error("[%s] Database unavailable: %s (code=%s)", rid, exc.detail, exc.code)
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.message,
                "message": exc.detail,
                "code": exc.code,
            },
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(UpstreamFetchError)
    async def handle_upstream_error(request: Request, exc: UpstreamFetchError):
        rid = request_id_var.get("")
        logger.error("[%s] Upstream error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all; the stack trace goes to the log, never to the client.

        Runs outside RequestIDMiddleware, so the X-Request-ID header is set here.
        """
        rid = request_id_var.get("") or request.headers.get("X-Request-ID", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
            headers={"X-Request-ID": rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    posts_client: Optional[PostsClient] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded singleton.
        database: Pre-built connection pool. When omitted, the lifespan
                  builds one from settings.
        posts_client: Pre-built upstream client. When omitted, the lifespan
                      builds one from settings.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    config = settings or default_settings

    app = FastAPI(
        title="Notes API",
        description=(
            "Liveness, an upstream posts proxy, and list/create for notes "
            "stored in a relational database."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.database = database
    app.state.posts_client = posts_client

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(notes.router)
    app.include_router(posts.router)

    return app


# uvicorn expects `notes_api.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "notes_api.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )
