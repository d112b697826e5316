"""Error Handlers: map exceptions escaping a route to the REST error body.

Invariants:
    - Every error body has the shape {"error": {code, message, category, severity, ...}}
    - JournalCoachError keeps its own http_status; request validation is 400
    - Anything else is 500 with a fixed message (details only in logs)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from journal_coach.core.errors import ErrorSeverity, JournalCoachError

logger = logging.getLogger(__name__)


async def domain_error_handler(request: Request, exc: JournalCoachError) -> JSONResponse:
    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        f"{exc.code} on {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def request_validation_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected request body on {request.url.path}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return _error_body(
        status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", "Invalid request data",
        "validation", ErrorSeverity.ERROR, details=details,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=exc)
    return _error_body(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR",
        "An unexpected error occurred", "internal", ErrorSeverity.CRITICAL,
    )


_HANDLERS = (
    (JournalCoachError, domain_error_handler),
    (RequestValidationError, request_validation_handler),
    (Exception, unhandled_error_handler),
)


def register_error_handlers(app: FastAPI) -> None:
    for exc_type, handler in _HANDLERS:
        app.add_exception_handler(exc_type, handler)


def _error_body(
    status_code: int, code: str, message: str, category: str,
    severity: ErrorSeverity, **fields,
) -> JSONResponse:
    error = {
        "code": code,
        "message": message,
        "category": category,
        "severity": severity.value,
        **fields,
    }
    return JSONResponse(status_code=status_code, content={"error": error})
