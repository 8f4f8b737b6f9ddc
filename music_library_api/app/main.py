"""
Main entrypoint for the Music Library API.

This module assembles the FastAPI application: it sets up logging,
wires the song store and service, registers request logging and error
handlers and includes the versioned routers.  The ``create_app``
function builds and configures the app, which is then instantiated at
module import time as ``app`` so it can be served directly::

    uvicorn music_library_api.app.main:app --reload

Interactive API documentation is served by FastAPI under ``/docs``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import get_database_path, init_db
from .core.errors import AppError, ErrorKind, http_status_for
from .core.logging_config import setup_logging
from .core.middleware import RequestLoggingMiddleware
from .services.song_repository import SongRepository
from .services.song_service import SongService

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

# Messages used when FastAPI rejects a request before it reaches a route.
_BAD_REQUEST_MESSAGES = {
    "path": "Invalid song ID",
    "query": "Invalid query parameters",
    "body": "Invalid request body",
}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Translate an ``AppError`` into a JSON error response."""
    status_code = http_status_for(exc.kind)
    message = INTERNAL_ERROR_MESSAGE if exc.kind is ErrorKind.INTERNAL else exc.message
    logger.error(
        "Request error path=%s status=%s message=%s error=%s",
        request.url.path,
        status_code,
        message,
        exc,
    )
    return JSONResponse(status_code=status_code, content={"detail": message})


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed identifiers, parameters and bodies as 400."""
    errors = exc.errors()
    location = errors[0]["loc"][0] if errors and errors[0].get("loc") else "body"
    message = _BAD_REQUEST_MESSAGES.get(location, "Invalid request")
    logger.error(
        "Request error path=%s status=%s message=%s errors=%s",
        request.url.path,
        status.HTTP_400_BAD_REQUEST,
        message,
        errors,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use; defaults to the module level settings read
        from the environment.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or default_settings
    # Initialise logging before anything else so that startup can log.
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    database_path = get_database_path(app_settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Creates the database file if it does not exist and brings the
        # schema up to date.
        init_db(database_path)
        logger.info("%s %s started, database %s", app_settings.project_name, app_settings.api_version, database_path)
        yield
        logger.info("%s stopped", app_settings.project_name)

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    repository = SongRepository(database_path)
    app.state.settings = app_settings
    app.state.song_service = SongService(
        repository,
        clear_empty_fields=app_settings.update_clears_empty_fields,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
