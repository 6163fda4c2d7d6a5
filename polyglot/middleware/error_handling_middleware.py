"""
Error handling for FastAPI integration.

PolyglotError subclasses are rendered as the standard error envelope with the
status code the exception class declares. Anything else becomes a generic
500. Only the sanitized ``user_friendly`` text and a small set of safe detail
keys ever reach the client; technical messages stay in the logs.
"""

import uuid
from collections.abc import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..error_types import ErrorMessages, ErrorSeverity, ErrorType, create_standard_error_response
from ..exceptions import AuthenticationError, DatabaseError, PolyglotError, ResourceNotFoundError
from ..structured_logging.enhanced_logging_config import get_logger, log_exception_once

logger = get_logger(__name__)

# Detail keys that never carry driver messages or other internals
SAFE_DETAIL_KEYS = frozenset({"resource_type", "resource_id"})

_ERROR_TYPES: list[tuple[type[PolyglotError], ErrorType, ErrorSeverity]] = [
    (ResourceNotFoundError, ErrorType.RESOURCE_NOT_FOUND, ErrorSeverity.LOW),
    (AuthenticationError, ErrorType.AUTHENTICATION_FAILED, ErrorSeverity.MEDIUM),
    (DatabaseError, ErrorType.DATABASE_ERROR, ErrorSeverity.HIGH),
]


def _classify(exc: PolyglotError) -> tuple[ErrorType, ErrorSeverity]:
    for exc_class, error_type, severity in _ERROR_TYPES:
        if isinstance(exc, exc_class):
            return error_type, severity
    return ErrorType.INTERNAL_ERROR, ErrorSeverity.HIGH


def polyglot_error_response(request: Request, exc: PolyglotError) -> JSONResponse:
    """Render a PolyglotError as the standard error envelope."""
    error_type, severity = _classify(exc)
    details = {key: value for key, value in exc.details.items() if key in SAFE_DETAIL_KEYS}
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        details["request_id"] = request_id

    return JSONResponse(
        status_code=exc.status_code,
        content=create_standard_error_response(
            error_type,
            exc.user_friendly,
            user_friendly=exc.user_friendly,
            details=details,
            severity=severity,
        ),
    )


def internal_error_response(request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=create_standard_error_response(
            ErrorType.INTERNAL_ERROR,
            ErrorMessages.INTERNAL_ERROR,
            details={"request_id": getattr(request.state, "request_id", None)},
            severity=ErrorSeverity.HIGH,
        ),
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catches exceptions that escape the routes and the inner middleware."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not hasattr(request.state, "request_id"):
            request.state.request_id = str(uuid.uuid4())

        try:
            return await call_next(request)
        except PolyglotError as exc:
            return polyglot_error_response(request, exc)
        except Exception as exc:
            log_exception_once(
                logger,
                "error",
                "Unhandled exception in request",
                exc=exc,
                path=request.url.path,
                method=request.method,
                exc_info=True,
            )
            return internal_error_response(request)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers for application errors raised inside routes."""

    @app.exception_handler(PolyglotError)
    async def polyglot_error_handler(request: Request, exc: PolyglotError):
        """Handle PolyglotError exceptions."""
        log_exception_once(logger, "warning", "Request failed", exc=exc, path=request.url.path)
        return polyglot_error_response(request, exc)

    logger.info("Error handlers registered for FastAPI application")


def setup_error_handling(app: FastAPI) -> None:
    """Install both the catch-all middleware and the PolyglotError handlers."""
    app.add_middleware(ErrorHandlingMiddleware)
    register_error_handlers(app)
    logger.info("Complete error handling setup completed")
