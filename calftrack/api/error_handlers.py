"""Error Handlers — global exception handlers for the calftrack API.

Invariants:
    - CalftrackError → its own to_response() envelope and http_status
    - RequestValidationError → 400 VALIDATION_ERROR with one detail per field
    - Exception (catch-all) → generic 500, never leaks internal details
    - Every body has the same shape: {"error": {code, message, category, severity, ...}}

Design Decisions:
    - Three-layer handler: domain (CalftrackError), validation (Pydantic), catch-all
    - 4xx domain errors log at WARNING, 5xx at ERROR with the attached cause
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from calftrack.core.errors import CalftrackError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(CalftrackError, handle_calftrack_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _envelope(
    code: str, message: str, category: ErrorCategory,
    severity: ErrorSeverity, **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


async def handle_calftrack_error(request: Request, exc: CalftrackError):
    extra = {"error_code": exc.code, "path": request.url.path}
    if exc.http_status >= 500:
        logger.error(
            f"CalftrackError: {exc.message}",
            extra=extra, exc_info=exc.__cause__ is not None,
        )
    else:
        logger.warning(f"CalftrackError: {exc.message}", extra=extra)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Request rejected with {len(details)} invalid field(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    """Catch-all: the traceback goes to the log, never to the client."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )
