"""Error Handlers — global exception handlers and result-to-response mapping.

Invariants:
    - ServiceError → JSON {"error", "code"} with the status from its code
    - RequestValidationError → 400 INVALID_INPUT with field-level details
    - StorageError escaping a route → 500 STORAGE_ERROR
    - Exception (catch-all) → never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from chatroom.core.errors import ServiceError, StorageError, ErrorCode

logger = logging.getLogger(__name__)


def error_response(error: ServiceError) -> JSONResponse:
    """Translate a service error result into an HTTP response."""
    return JSONResponse(
        status_code=error.http_status, content=error.to_response(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_validation_error_handler(app)
    _register_storage_error_handler(app)
    _register_generic_error_handler(app)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Malformed request bodies and parameters."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"path": request.url.path,
                   "error_code": ErrorCode.INVALID_INPUT.value},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_storage_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        """Storage failures raised outside a service call (session teardown, commits)."""
        logger.error(
            f"StorageError: {exc.message}",
            extra={"path": request.url.path, "operation": exc.operation,
                   "error_code": ErrorCode.STORAGE_ERROR.value},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": exc.message or "Storage operation failed",
                "code": ErrorCode.STORAGE_ERROR.value,
            },
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "error": "Invalid request data",
        "code": ErrorCode.INVALID_INPUT.value,
        "details": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }
