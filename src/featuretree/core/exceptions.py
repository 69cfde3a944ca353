"""Domain errors and the handlers that render them with request_id."""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.featuretree.core.config import get_settings
from src.featuretree.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_STORAGE_MESSAGE = "A storage error occurred. Please try again."
GENERIC_SERVER_MESSAGE = "Internal server error"


class FeatureTrackerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(FeatureTrackerError):
    """Malformed input or a violated domain invariant. Never retried."""

    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateNameError(ValidationError):
    status_code = status.HTTP_409_CONFLICT


class CycleError(ValidationError):
    """Re-parenting would make a feature its own ancestor."""


class AccountingStateError(ValidationError):
    """is_accounting_done requested while accounting is not required."""


class NotFoundError(FeatureTrackerError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(FeatureTrackerError):
    """Persistence or blob-store failure. Detail is only shown in development."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(status_code: int, detail: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "request_id": correlation_id.get(),
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage error", detail=exc.detail, path=request.url.path)
        detail = exc.detail if get_settings().is_development else GENERIC_STORAGE_MESSAGE
        return _error_response(exc.status_code, detail)

    @app.exception_handler(FeatureTrackerError)
    async def domain_error_handler(request: Request, exc: FeatureTrackerError) -> JSONResponse:
        logger.info(
            "Request rejected",
            error=type(exc).__name__,
            detail=exc.detail,
            path=request.url.path,
        )
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
        )
        detail = str(exc) if get_settings().is_development else GENERIC_SERVER_MESSAGE
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
