"""
Journal Board Backend — FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, error mapping
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌────────────┐   │
    │  │ Req ID   │→│ Logging  │→│  GZip    │→│   CORS     │   │
    │  └──────────┘ └──────────┘ └──────────┘ └────────────┘   │
    │                                                          │
    │  Routes (/api/v1):                                       │
    │  boards · pages · elements · recap · upload              │
    │  plus /uploads/boards/… and /health                      │
    │                                                          │
    │  Exception Handlers:                                     │
    │  ┌────────────────────────────────────────────────────┐  │
    │  │ Validation→422 │ NotFound→404 │ Unauthorized→401   │  │
    │  │ Consistency→409 │ Database/FileStorage/other→500   │  │
    │  └────────────────────────────────────────────────────┘  │
    └──────────────────────────────────────────────────────────┘

Error body (every failure):
    {"error": {"code": "...", "message": "...", "details": ...}, "request_id": "..."}

Lifecycle:
    Startup:  configure logging, create the upload directory, log the bind address
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import (
    DatabaseError,
    FileStorageError,
    JournalBoardError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, current_request_id
from app.routes import boards, elements, health, pages, recap, uploads

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] app.services.ordering: Moved page … to 0 (3 rows updated)

    Called once from the lifespan, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # These log every statement / connection at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Journal Board Backend %s starting up...", __version__)

    uploads_dir = Path(settings.upload_root)
    uploads_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", uploads_dir.resolve())

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Journal Board Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": jsonable_encoder(details) if details else None,
            },
            "request_id": current_request_id(request),
        },
    )


_HTTP_CODES = {
    401: "UNAUTHORIZED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the error envelope.

    Handler hierarchy:
        RequestValidationError  → 422 VALIDATION_ERROR (FastAPI schema failures)
        DatabaseError           → 500 DATABASE_ERROR (generic message)
        FileStorageError        → 500 INTERNAL_ERROR
        JournalBoardError       → exc.status_code / exc.code (404, 401, 409, 422)
        HTTPException           → its status (unknown routes, wrong methods)
        Exception (fallback)    → 500 INTERNAL_ERROR

    Security: responses never include SQL, file paths or stack traces; those
    are logged server-side with the request ID.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body/query/path failed schema validation before reaching a service."""
        logger.warning("[%s] Request validation failed: %s", current_request_id(request), exc.errors())
        return error_response(
            request, 422, "VALIDATION_ERROR", "Request validation failed", exc.errors(),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = current_request_id(request)
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(request, exc.status_code, exc.code, exc.message)

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        rid = current_request_id(request)
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(request, exc.status_code, exc.code, exc.message)

    @app.exception_handler(JournalBoardError)
    async def handle_journal_board_error(request: Request, exc: JournalBoardError):
        """Client-visible outcomes: not found, unauthorized, consistency, validation."""
        rid = current_request_id(request)
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, exc.code, exc.message, exc.context)
            return error_response(request, exc.status_code, exc.code, exc.message)

        logger.info("[%s] %s: %s", rid, exc.code, exc.message)
        return error_response(request, exc.status_code, exc.code, exc.message, exc.context)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
        return error_response(request, exc.status_code, code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, full stack trace in the server log only."""
        logger.error(
            "[%s] Unexpected error: %s",
            current_request_id(request),
            str(exc),
            exc_info=True,
        )
        return error_response(
            request,
            500,
            "INTERNAL_ERROR",
            "An unexpected error occurred. Please try again later.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Tests build their own instance through this factory and override the
    get_db_session dependency.
    """
    app = FastAPI(
        title="Junk Journal Board API",
        description=(
            "Boards of ordered pages holding z-stacked elements. Access is granted "
            "by capability tokens: the edit token allows changes, the public token "
            "allows read-only viewing."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Execution order is the reverse of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,  # Tokens travel in the URL, never in cookies
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(boards.router)
    app.include_router(pages.router)
    app.include_router(elements.router)
    app.include_router(recap.router)
    app.include_router(uploads.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()
