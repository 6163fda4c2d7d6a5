"""
Error logging utilities for the Polyglot server.

Log-then-raise helper used at storage boundaries so the technical message is
recorded before the sanitized exception propagates.
"""

from typing import Any, NoReturn

from ..exceptions import ErrorContext, PolyglotError, create_error_context
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


def log_and_raise(
    exception_class: type[PolyglotError],
    message: str,
    context: ErrorContext | None = None,
    details: dict[str, Any] | None = None,
    user_friendly: str | None = None,
    **kwargs: Any,
) -> NoReturn:
    """
    Log an error and raise a Polyglot exception.

    The exception logs its own structured record on construction; this helper
    adds the call-site record so both the technical message and the origin
    end up in errors.log.

    Args:
        exception_class: The exception class to raise
        message: Technical error message
        context: Error context information
        details: Additional error details
        user_friendly: Message safe to show the client
        **kwargs: Extra keyword arguments for the exception class
    """
    context = context or create_error_context()
    logger.error(
        message,
        error_type=exception_class.__name__,
        context=context.to_dict(),
        details=details or {},
    )
    raise exception_class(message, context=context, details=details, user_friendly=user_friendly, **kwargs)
