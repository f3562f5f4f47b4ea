"""Map the error taxonomy onto HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import (
    ConflictError,
    DirectoryError,
    InvalidIdentifierError,
    NotFoundError,
    ValidationError,
)
from app.core.logging import get_logger

logger = get_logger(__name__)

# Conflicts are reported as 400 ("Property already bookmarked"), matching
# the contract existing clients were built against.
STATUS_BY_ERROR = [
    (InvalidIdentifierError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
]


def status_for(exc: DirectoryError) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def directory_error_handler(request: Request, exc: DirectoryError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        # Details were logged where the failure happened; don't leak them
        logger.error("%s %s failed: %s", request.method, request.url.path, type(exc).__name__)
        return JSONResponse(status_code=code, content={"detail": "Server error"})

    logger.info("%s %s -> %d: %s", request.method, request.url.path, code, exc.message)
    return JSONResponse(status_code=code, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DirectoryError, directory_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
