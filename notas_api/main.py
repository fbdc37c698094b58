"""
Notas API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception
       mapping and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn notas_api.main:app) or `python -m notas_api`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Access log → GZip → CORS              │
    │                                                     │
    │  Routes:                                            │
    │    POST /login                                      │
    │    /usuarios  /materias  /estudiantes  /notas       │
    │    GET /   GET /health                              │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400  UnauthorizedError→401       │
    │    NotFoundError→404    unknown route→404           │
    │    StoreError→500       anything else→500           │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, build the Store (connection pool)
    Shutdown: dispose the Store (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notas_api import __version__
from notas_api.config import settings
from notas_api.database import Store
from notas_api.exceptions import (
    NotFoundError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)
from notas_api.middleware.logging import AccessLogMiddleware, request_id_var
from notas_api.routes import auth, health, resources

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker / the hosting platform)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's access log duplicates AccessLogMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Builds the Store on startup and disposes it on shutdown.

    A store injected through create_app(store=...) is used as-is and left
    open; its owner disposes it.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Notas API %s starting up...", __version__)

    owns_store = getattr(app.state, "store", None) is None
    if owns_store:
        app.state.store = Store.from_settings(settings)
    logger.info("Database: %s", app.state.store.engine.url.render_as_string(hide_password=True))
    logger.info("Server ready on port %d", settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Notas API shutting down...")
    if owns_store:
        await app.state.store.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP answers.

    Handler hierarchy:
        ValidationError         → 400 {"msg"}
        RequestValidationError  → 400 {"msg", "detail"}  (unparseable body/path)
        UnauthorizedError       → 401 {"msg"}
        NotFoundError           → 404 {"msg"}
        no route / bad method   → 404 {"error", "path", "method"}
        StoreError              → 500 {"error": driver message}
        Exception (fallback)    → 500 {"error": str(exc)}
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s %s", request_id_var.get(""), exc.message, exc.fields)
        return JSONResponse(status_code=400, content={"msg": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_request(request: Request, exc: RequestValidationError):
        """Invalid JSON, a non-numeric id, or a body field of the wrong type."""
        return JSONResponse(
            status_code=400,
            content={"msg": "Solicitud inválida", "detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return JSONResponse(status_code=401, content={"msg": exc.message})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"msg": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown path and known path with an unsupported method look the same
        # to clients: there is no route for this request.
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Ruta no encontrada",
                    "path": request.url.path,
                    "method": request.method,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error("[%s] Store error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(exc)})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[Store] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Pre-built store to use instead of one built from settings
               (tests pass a fake or a SQLite-backed store here).
    """
    app = FastAPI(
        title="Notas API",
        description="Users, subjects, students and grades for an academic records front-end.",
        version=__version__,
        lifespan=lifespan,
    )
    if store is not None:
        app.state.store = store

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # AccessLog → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(AccessLogMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(resources.usuarios_router)
    app.include_router(resources.materias_router)
    app.include_router(resources.estudiantes_router)
    app.include_router(resources.notas_router)

    return app


# uvicorn expects `notas_api.main:app` to be importable
app = create_app()
