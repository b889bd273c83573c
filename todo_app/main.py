"""
Todo App - Main Application Entry Point.

A todo-list REST API over a pluggable SQL store (SQLite or PostgreSQL).
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from todo_app.api import todo_router
from todo_app.config import Settings, get_settings
from todo_app.database import StoreError, TodoStore, get_store, select_store
from todo_app.models.schemas import ApiResponse, FieldError

logger = structlog.get_logger()

# Same defaults as helmet, minus the content security policy
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}


def configure_logging(settings: Settings) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer() if settings.environment == "production"
            else structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            10 if settings.debug else 20
        )
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add the default security headers to every response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class ClientFiles(StaticFiles):
    """Static client bundle; unknown non-API paths fall back to index.html."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404 or path.split("/", 1)[0] == "api":
                raise
            return await super().get_response("index.html", scope)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize the store on startup and tear it down on shutdown."""
    store: TodoStore = app.state.store

    try:
        await store.init()
    except Exception as exc:
        logger.error("Failed to initialize database", error=str(exc))
        raise
    logger.info("Database initialized successfully")

    try:
        yield
    finally:
        logger.info("Shutting down, closing database connection...")
        await store.teardown()


def _envelope(status_code: int, headers: dict[str, str] | None = None, **fields) -> JSONResponse:
    body = ApiResponse[None](success=False, **fields)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def create_app(settings: Settings | None = None, store: TodoStore | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    The store is resolved once here (from configuration unless given) and
    handed to routes through ``app.state``.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    if store is None:
        store = get_store() if settings is get_settings() else select_store(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Todo list REST API backed by SQLite or PostgreSQL.",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityHeadersMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Reject malformed input with 400 and per-field messages."""
        errors = exc.errors()
        in_path = any(err["loc"] and err["loc"][0] == "path" for err in errors)
        return _envelope(
            400,
            message="Invalid parameters" if in_path else "Validation failed",
            errors=[
                FieldError(
                    field=".".join(str(part) for part in err["loc"][1:]),
                    message=err["msg"],
                )
                for err in errors
            ],
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = exc.detail
        if exc.status_code == 404 and message == "Not Found":
            message = "Route not found"
        return _envelope(
            exc.status_code, headers=getattr(exc, "headers", None), message=message
        )

    # Handlers for concrete classes run inside the middleware stack (CORS
    # headers included); the bare Exception handler is the outermost fallback.
    @app.exception_handler(StoreError)
    @app.exception_handler(SQLAlchemyError)
    @app.exception_handler(OSError)
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True
        )
        return _envelope(
            500,
            error="Internal server error",
            message=str(exc) if settings.debug else None,
        )

    app.include_router(todo_router, prefix="/api")

    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "success": True,
            "message": "Server is healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    static_dir = settings.server.static_dir
    if static_dir and Path(static_dir).is_dir():
        app.mount("/", ClientFiles(directory=static_dir, html=True), name="client")
        logger.info("Serving client bundle", directory=static_dir)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = get_settings()
    logger.info(
        "Starting server",
        port=settings.server.port,
        environment=settings.environment,
    )
    uvicorn.run(
        "todo_app.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
