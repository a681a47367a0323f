"""Mapping from deal import errors to HTTP responses.

The service layer raises a closed family of errors; this table is the
single place where each kind is given a status code and error code.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from fx_deals.schemas.common import ErrorResponse
from fx_deals.services.errors import DealImportError, DealPersistenceError, DealValidationError, DuplicateDealError

ERROR_STATUS_MAP: dict[type[DealImportError], tuple[int, str]] = {
    DealValidationError: (status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR"),
    DuplicateDealError: (status.HTTP_409_CONFLICT, "DUPLICATE_DEAL"),
    DealPersistenceError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR"),
}

_FALLBACK = (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")


def error_response(exc: DealImportError) -> JSONResponse:
    """Build the JSON error response for a deal import error."""
    status_code, code = ERROR_STATUS_MAP.get(type(exc), _FALLBACK)
    violations = exc.violations if isinstance(exc, DealValidationError) else None
    body = ErrorResponse(detail=str(exc), code=code, errors=violations)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def deal_import_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """FastAPI exception handler for DealImportError."""
    assert isinstance(exc, DealImportError)
    if isinstance(exc, DealPersistenceError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return error_response(exc)


def register_error_handlers(app: FastAPI) -> None:
    """Register the deal import error handler on an app."""
    app.add_exception_handler(DealImportError, deal_import_error_handler)
