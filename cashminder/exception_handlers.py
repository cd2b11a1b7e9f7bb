"""
Maps the domain exceptions onto HTTP responses with a consistent body:

    {"detail": "Human-readable error message", "code": "MACHINE_READABLE_CODE"}
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from cashminder.core.exceptions import (
    CashminderError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _status_for(exc: CashminderError) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, RepositoryError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def cashminder_error_handler(request: Request, exc: CashminderError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CashminderError, cashminder_error_handler)
