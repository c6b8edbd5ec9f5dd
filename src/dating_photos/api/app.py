"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from dating_photos.api.photos import router as photos_router
from dating_photos.app_logging import configure_logging
from dating_photos.containers import AppContainer
from dating_photos.domain.errors import (
    MediaStoreError,
    PhotoError,
    PhotoNotFoundError,
    PhotoPersistenceError,
    PhotoUnauthorizedError,
    PhotoValidationError,
)

_ERROR_STATUS_CODES: dict[type[PhotoError], int] = {
    PhotoUnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    PhotoValidationError: status.HTTP_400_BAD_REQUEST,
    PhotoPersistenceError: status.HTTP_400_BAD_REQUEST,
    PhotoNotFoundError: status.HTTP_404_NOT_FOUND,
    MediaStoreError: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(photos_router)

    @app.exception_handler(PhotoError)
    async def photo_error_handler(request: Request, exc: PhotoError) -> JSONResponse:
        status_code = _status_code_for(exc)
        logger.info(
            "Photo request failed",
            extra={"path": request.url.path, "status_code": status_code},
        )
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _status_code_for(exc: PhotoError) -> int:
    """Map a photo error to its HTTP status code."""
    for error_type in type(exc).__mro__:
        if error_type in _ERROR_STATUS_CODES:
            return _ERROR_STATUS_CODES[error_type]
    return status.HTTP_400_BAD_REQUEST
