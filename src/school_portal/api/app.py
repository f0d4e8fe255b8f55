"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from school_portal.api.admin import router as admin_router
from school_portal.api.public import router as public_router
from school_portal.app_logging import configure_logging
from school_portal.containers import AppContainer
from school_portal.domain.errors import (
    AuthError,
    DuplicateIdError,
    NotFoundError,
    PersistenceError,
    PortalError,
    UploadError,
    ValidationError,
)

# Most specific first; the first isinstance match wins.
_STATUS_BY_ERROR: tuple[tuple[type[PortalError], int], ...] = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (UploadError, status.HTTP_502_BAD_GATEWAY),
    (DuplicateIdError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        origin = app.state.container.settings.serving_origin
        logger.info("Serving profile links under %s", origin)
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)
    app.include_router(public_router)

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
        """Report portal failures to the caller as a notification message."""
        status_code = error_status(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.exception(
                "Request failed", exc_info=exc, extra={"path": request.url.path}
            )
        state_container: AppContainer = request.app.state.container
        return JSONResponse(
            status_code=status_code,
            content={"detail": _format_error(state_container, exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def error_status(exc: PortalError) -> int:
    """Return the HTTP status for a portal error."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _format_error(state_container: AppContainer, exc: PortalError) -> str:
    """Return a user-facing error message with local debug info."""
    message = str(exc)
    cause = exc.__cause__
    if state_container.settings.environment == "local" and cause is not None:
        return f"{message} (debug: {type(cause).__name__}: {cause})"
    return message
