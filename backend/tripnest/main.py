"""
TripNest Backend - FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) builds the engine, session factory, file service
       and OAuth client from one Settings object, stores them on app.state,
       registers middleware, exception handlers and routers, and mounts the
       upload directory as static files.
Who:   uvicorn (`uvicorn tripnest.main:app` or the `tripnest` script) and the
       test suite (create_app with a SQLite URL and a temporary upload dir).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │  Middleware: RequestID → Logging → Session → GZip → CORS │
    │  Routes:     auth · items · hotels · reservations ·      │
    │              health · /uploads (static)                  │
    │  Handlers:   400 · 401 · 302 login · 403 · 404 · 409 · 500│
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration warnings, upload directory,
              optional create_all (DB_AUTO_CREATE)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from tripnest import __version__
from tripnest.config import Settings, load_settings
from tripnest.database import build_engine, build_session_factory, create_schema, dispose_engine
from tripnest.exceptions import (
    DatabaseError,
    DuplicateKeyError,
    FileStorageError,
    ForbiddenError,
    LoginRequiredError,
    NotFoundError,
    OAuthError,
    TripNestError,
    UnauthorizedError,
    ValidationError,
)
from tripnest.middleware.logging import RequestLoggingMiddleware
from tripnest.middleware.request_id import RequestIDMiddleware, request_id_var
from tripnest.routes import auth, health, hotels, items, reservations
from tripnest.services.file_service import FileService
from tripnest.services.oauth_service import GoogleOAuthClient

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once, at startup.

    Format: 2024-01-15T12:00:00 [INFO] tripnest.services.item_service: Item created: ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-operation chatter from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("TripNest Backend starting up (environment=%s)", settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # The server still starts; affected features fail per request
        logger.warning("%s", str(e))

    app.state.file_service.ensure_upload_dir()
    logger.info("Upload directory: %s", app.state.file_service.upload_dir)

    if settings.db_auto_create:
        await create_schema(app.state.engine)
        logger.info("Database schema ensured (DB_AUTO_CREATE)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("TripNest Backend shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Handler table:
        ValidationError         → 400 Bad Request (details: field / errors)
        UnauthorizedError       → 401 Unauthorized
        LoginRequiredError      → 302 to the login page
        OAuthError              → 302 to the login page (the failure redirect)
        ForbiddenError          → 403 Forbidden
        NotFoundError           → 404 Not Found
        DuplicateKeyError       → 409 Conflict
        FileStorageError        → 500 (generic message)
        DatabaseError           → 500 (generic message)
        TripNestError / other   → 500 (generic message, stack trace logged)

    5xx bodies never include exception context; it is logged server-side.
    """
    settings: Settings = app.state.settings

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return JSONResponse(status_code=401, content=_error_body("unauthorized", exc.message))

    @app.exception_handler(LoginRequiredError)
    async def handle_login_required(request: Request, exc: LoginRequiredError):
        return RedirectResponse(url=settings.login_url, status_code=302)

    @app.exception_handler(OAuthError)
    async def handle_oauth_error(request: Request, exc: OAuthError):
        logger.warning(
            "[%s] OAuth sign-in failed: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return RedirectResponse(url=settings.login_url, status_code=302)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return JSONResponse(status_code=403, content=_error_body("forbidden", exc.message))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(DuplicateKeyError)
    async def handle_duplicate_key(request: Request, exc: DuplicateKeyError):
        return JSONResponse(
            status_code=409,
            content=_error_body("duplicate_key", exc.message, exc.context),
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error(
            "[%s] File storage error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content=_error_body("server_error", exc.message))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(TripNestError)
    async def handle_application_error(request: Request, exc: TripNestError):
        logger.error(
            "[%s] Unhandled application error %s: %s | Context: %s",
            request_id_var.get(""),
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    oauth_client: Optional[GoogleOAuthClient] = None,
) -> FastAPI:
    """
    Assemble the application from one Settings object.

    Args:
        settings:      Defaults to load_settings() (environment / .env)
        oauth_client:  Defaults to GoogleOAuthClient.from_settings(settings);
                       tests pass a client with a mock transport
    """
    settings = settings or load_settings()

    app = FastAPI(
        title="TripNest API",
        description=(
            "Booking backend: accounts with local and Google sign-in, attractions "
            "with images, hotels, and reservation requests."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Application State ─────────────────────────────────────────────────
    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.file_service = FileService.from_settings(settings)
    app.state.oauth_client = oauth_client or GoogleOAuthClient.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → Session → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.is_production,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(items.router)
    app.include_router(hotels.router)
    app.include_router(reservations.router)
    app.include_router(health.router)

    # Directory is created at startup and on first write, not at import
    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=str(app.state.file_service.upload_dir), check_dir=False),
        name="uploads",
    )

    return app


def run() -> None:
    """Console entry point: `tripnest`."""
    settings = load_settings()
    uvicorn.run(
        "tripnest.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn imports `tripnest.main:app`
app = create_app()
