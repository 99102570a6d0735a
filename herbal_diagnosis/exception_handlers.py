"""
Name: FastAPI Exception Handlers

Responsibilities:
  - Convert boundary exceptions to RFC 7807 problem responses
  - Log errors with their error_id for correlation

Collaborators:
  - main.py: Registers these handlers
  - exceptions.py: InvalidInputError, HistoryStorageError, HerbalDiagnosisError
  - error_responses.py: ErrorDetail / AppHTTPException

Constraints:
  - Invalid input -> 422; history storage -> 503; anything else -> 500
  - Pipeline degradation never reaches these handlers (chains absorb it)
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .error_responses import (
    AppHTTPException,
    app_exception_handler,
    generic_exception_handler,
    internal_error,
    storage_error,
    validation_error,
)
from .exceptions import HerbalDiagnosisError, HistoryStorageError, InvalidInputError
from .logger import logger


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": str(error.get("msg", "")),
            "type": str(error.get("type", "")),
        }
        for error in exc.errors()
    ]


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request body/path validation errors."""
    errors = _validation_errors(exc)
    logger.info("Request validation failed", extra={"errors": len(errors)})
    app_exc = validation_error("Request validation failed", errors)
    return await app_exception_handler(request, app_exc)


async def invalid_input_handler(
    request: Request, exc: InvalidInputError
) -> JSONResponse:
    """Handle invalid symptoms/answers rejected by the application layer."""
    logger.info(
        "Invalid input", extra={"error_id": exc.error_id, "error_message": exc.message}
    )
    app_exc = validation_error(exc.message, [{"error_id": exc.error_id}])
    return await app_exception_handler(request, app_exc)


async def history_storage_error_handler(
    request: Request, exc: HistoryStorageError
) -> JSONResponse:
    """Handle history storage errors."""
    logger.error(
        "History storage error",
        extra={"error_id": exc.error_id, "error_message": exc.message},
    )
    app_exc = storage_error(exc.message, [{"error_id": exc.error_id}])
    return await app_exception_handler(request, app_exc)


async def diagnosis_error_handler(
    request: Request, exc: HerbalDiagnosisError
) -> JSONResponse:
    """Handle any other typed error that escaped to the boundary."""
    logger.error(
        "Unhandled service error",
        extra={"error_id": exc.error_id, "error_code": exc.error_code},
    )
    app_exc = internal_error(errors=[{"error_id": exc.error_id}])
    return await app_exception_handler(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        extra={"error_type": type(exc).__name__, "path": request.url.path},
        exc_info=exc,
    )
    return await generic_exception_handler(request, exc)


def register_exception_handlers(app) -> None:
    """
    Register all exception handlers on the FastAPI app.

    Usage:
        from .exception_handlers import register_exception_handlers
        register_exception_handlers(app)
    """
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(InvalidInputError, invalid_input_handler)
    app.add_exception_handler(HistoryStorageError, history_storage_error_handler)
    app.add_exception_handler(HerbalDiagnosisError, diagnosis_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
