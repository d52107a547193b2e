"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations and databases
- Explicit about initialization order
- The storage adapter is built here and injected, never looked up globally

For local development:
    uvicorn million_meters.main:app --reload

Or, honoring PORT and HOST from the environment:
    python -m million_meters.main
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api.routes import health, meters, summary, swimmers
from .config.settings import Settings, get_settings
from .core.tracking.service import SwimmerNotFoundError
from .core.tracking.validation import ValidationError
from .infrastructure.database.base import (
    Database,
    ReferentialIntegrityError,
    StorageError,
    StorageRangeError,
)
from .infrastructure.database.client import create_database
from .infrastructure.database.schema import SchemaManager

# Configure logging; create_app() applies the configured level
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup brings the schema up to date before any request is served.
    A schema or migration failure propagates and aborts startup: serving
    traffic on an inconsistent schema is worse than not serving at all.
    Shutdown releases the adapter's connections.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(
        "Million Meters API starting",
        extra={"version": __version__, "storage_backend": settings.storage_backend},
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    try:
        migrated = SchemaManager(database).initialize()
    except StorageError:
        logger.critical("Database schema setup failed; refusing to start", exc_info=True)
        database.close()
        raise

    logger.info("Database ready", extra={"share_number_migrated": migrated})

    yield

    database.close()
    logger.info("Million Meters API shutting down")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Translate domain and storage errors into {"error": message} responses.

    Validation problems are the client's to fix (400); a missing swimmer
    on delete is 404; anything the database throws is a generic 500 so
    driver messages never reach clients.
    """

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info(
            "Rejected invalid input",
            extra={"path": request.url.path, "error_type": type(exc).__name__, "error": str(exc)},
        )
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(ReferentialIntegrityError)
    async def referential_integrity_handler(request: Request, exc: ReferentialIntegrityError):
        logger.info(
            "Rejected write referencing missing row",
            extra={"path": request.url.path, "error": str(exc)},
        )
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(StorageRangeError)
    async def storage_range_handler(request: Request, exc: StorageRangeError):
        logger.info(
            "Rejected value outside the storable range",
            extra={"path": request.url.path, "error": str(exc)},
        )
        return _error(status.HTTP_400_BAD_REQUEST, "Value is too large to store")

    @app.exception_handler(SwimmerNotFoundError)
    async def swimmer_not_found_handler(request: Request, exc: SwimmerNotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(
            "Storage failure",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Database error. Please try again later.",
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return _error(status.HTTP_400_BAD_REQUEST, f"Invalid request body: {message}")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Prevents stack traces from leaking to clients. We log the full
        error server-side but return a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error. Please contact support if this persists.",
        )


def mount_dashboard(app: FastAPI, static_dir: Path) -> None:
    """
    Serve the dashboard shell.

    Assets live under /static; every other GET that no API route claimed
    gets index.html so client-side navigation works. Unknown /api paths
    stay JSON 404s.
    """
    index_file = static_dir / "index.html"

    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")
    else:
        logger.warning("Static directory not found", extra={"path": str(static_dir)})

    @app.get("/{full_path:path}", include_in_schema=False)
    async def application_shell(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise StarletteHTTPException(status_code=404, detail="Not found")
        if not index_file.is_file():
            raise StarletteHTTPException(status_code=404, detail="Dashboard not installed")
        return FileResponse(index_file)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Configuration; defaults to environment-derived settings
        database: Storage adapter; defaults to the one settings select
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    database = database or create_database(settings)

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        description="""
        Shared swimming challenge: one million meters, logged session by session.

        ## Workflow

        1. **Register swimmers**: `POST /api/swimmers`
        2. **Log sessions**: `POST /api/meters`
        3. **Track progress**: `GET /api/summary`
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        swimmers.router,
        prefix="/api/swimmers",
        tags=["Swimmers"],
    )

    app.include_router(
        meters.router,
        prefix="/api/meters",
        tags=["Meters"],
    )

    app.include_router(
        summary.router,
        prefix="/api/summary",
        tags=["Summary"],
    )

    # Registered last so API routes win
    mount_dashboard(app, Path(settings.static_dir))

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": __version__,
        }
    )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "million_meters.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
