"""
NoteForge Backend: FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() returns a configured FastAPI app; run() serves it with
       uvicorn (console script `noteforge`).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes:                                            │
    │    /api/notes (CRUD + AI)   /api/notes/llm          │
    │    /health                  /  (static client)      │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400  NotFound→404                │
    │    ConfigError/UpstreamError/DatabaseError→500      │
    │    anything else→500 (message echoed)               │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, config check (warn only), create tables, fail-fast
              handler for exceptions escaping background tasks
    Shutdown: dispose database engine
"""

import asyncio
import logging
import signal
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from noteforge import __version__
from noteforge.config import settings
from noteforge.database import dispose_engine, init_models
from noteforge.exceptions import (
    ConfigError,
    DatabaseError,
    NoteForgeError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from noteforge.middleware.logging import RequestLoggingMiddleware
from noteforge.middleware.request_id import RequestIDMiddleware, request_id_var
from noteforge.routes import health, llm, notes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure stdout logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Process-level failure handling
# ══════════════════════════════════════════════════════════════════════════

def _log_uncaught(exc_type, exc, tb) -> None:
    logger.critical("UNCAUGHT EXCEPTION! Shutting down...", exc_info=(exc_type, exc, tb))
    sys.exit(1)


def _loop_exception_handler(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    """Exceptions escaping a task outside any request: log, then stop the server."""
    exc = context.get("exception")
    logger.critical(
        "UNHANDLED ASYNC ERROR! Shutting down... %s",
        context.get("message", ""),
        exc_info=exc,
    )
    signal.raise_signal(signal.SIGTERM)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("NoteForge Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # The CRUD API still works; LLM routes answer 500 until this is fixed
        logger.error("Configuration error: %s", str(e))

    if settings.create_tables:
        await init_models()
        logger.info("Database schema ready")

    asyncio.get_running_loop().set_exception_handler(_loop_exception_handler)

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    yield

    logger.info("NoteForge Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(error: str, message: str, details: Optional[dict] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Maps exception types to HTTP status codes and the ErrorResponse shape.

        ValidationError, RequestValidationError  → 400
        NotFoundError                            → 404
        ConfigError, UpstreamError               → 500
        DatabaseError                            → 500 (generic message)
        NoteForgeError, Exception                → 500 (message echoed)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request body")
        if location:
            message = f"{location}: {message}"
        return JSONResponse(
            status_code=400,
            content=error_body(
                "validation_error",
                message,
                {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors]},
            ),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=error_body("not_found", exc.message))

    @app.exception_handler(ConfigError)
    async def handle_config_error(request: Request, exc: ConfigError):
        logger.error("[%s] LLM configuration error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=500, content=error_body("llm_config_error", exc.message))

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        logger.error("[%s] LLM upstream error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=error_body("llm_upstream_error", exc.message, exc.context),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content=error_body("server_error", exc.message))

    @app.exception_handler(NoteForgeError)
    async def handle_app_error(request: Request, exc: NoteForgeError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=500, content=error_body("server_error", exc.message))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        # Runs in ServerErrorMiddleware, outside the CORS and request-ID middleware
        headers = {"X-Request-ID": getattr(request.state, "request_id", "")}
        origin = request.headers.get("origin")
        allowed = settings.cors_origins_list
        if "*" in allowed:
            headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in allowed:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        return JSONResponse(
            status_code=500,
            content=error_body("internal_server_error", str(exc) or type(exc).__name__),
            headers=headers,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def mount_client(app: FastAPI, static_dir: str) -> None:
    """Serves the browser client at `/` when the directory exists."""
    directory = Path(static_dir)
    if not directory.is_dir():
        logger.warning("Static client directory %s not found; UI disabled", directory)
        return
    app.mount("/", StaticFiles(directory=str(directory), html=True), name="client")


def create_app() -> FastAPI:
    app = FastAPI(
        title="NoteForge API",
        description=(
            "Note-taking backend: notes with title, body and tags, plus AI "
            "summarize / generate-title / elaborate actions backed by Google Gemini."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware runs in reverse order of addition:
    # RequestID → Logging → GZip → CORS → route
    allow_all = "*" in settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(llm.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    # Last: the catch-all mount must not shadow the API routes
    mount_client(app, settings.static_dir)

    return app


app = create_app()


def run() -> None:
    """Console entry point: `noteforge` (or `python -m noteforge.main`)."""
    import uvicorn

    setup_logging()
    sys.excepthook = _log_uncaught
    uvicorn.run(
        "noteforge.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
