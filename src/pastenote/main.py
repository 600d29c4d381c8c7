# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import health_router, notes_router, pages_router
from .config import Settings, get_settings
from .core.accounting import ViewCounter, ViewCountFlusher
from .core.exceptions import NoteError
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.rendering import load_markdown_file
from .core.schemas.common import ErrorResponse
from .database import AsyncSessionLocal, create_tables, engine

# Setup logging first
setup_logging()
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings: Settings = app.state.settings
    logger.info(
        "Starting pastenote",
        extra={"version": settings.app_version, "environment": settings.environment, "debug": settings.debug},
    )

    # Allow tests to skip touching the real DB (e.g., when using SQLite in-memory)
    if os.getenv("PASTENOTE_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to PASTENOTE_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    app.state.view_flusher.start()

    yield

    # Shutdown
    logger.info("Shutting down pastenote")
    await app.state.view_flusher.stop()
    await engine.dispose()


async def note_error_handler(request: Request, exc: NoteError) -> JSONResponse:
    """Map core errors to JSON error responses."""
    body = ErrorResponse(error=exc.code.value, message=exc.message, details=exc.details or None)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Anonymous text notes",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # one counter per process, shared by request handlers and the flusher
    view_counter = ViewCounter()
    app.state.settings = settings
    app.state.view_counter = view_counter
    app.state.view_flusher = ViewCountFlusher(
        view_counter, AsyncSessionLocal, settings.stats_flush_interval_seconds
    )
    app.state.ads_html = load_markdown_file(settings.ads_file)

    app.add_exception_handler(NoteError, note_error_handler)

    # Add logging middleware
    app.add_middleware(LoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(notes_router, prefix="/api")
    app.include_router(pages_router, prefix="/api")
    app.include_router(health_router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": "pastenote API"}

    # Basic unprefixed liveness endpoint
    @app.get("/health")
    async def basic_health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("pastenote.main:app", host=settings.host, port=settings.port, reload=settings.reload)
