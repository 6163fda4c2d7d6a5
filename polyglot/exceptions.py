"""
Exception hierarchy for the Polyglot server.

Every application error derives from PolyglotError, carries an ErrorContext
and logs itself once on construction. The ``user_friendly`` message is the
only text that may be shown to a client.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ErrorContext:
    """Contextual information for error reporting and debugging."""

    user_id: str | None = None
    session_id: str | None = None
    request_id: str | None = None
    path: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for logging."""
        return {
            "user_id": self.user_id,
            "session_id": self.session_id,
            "request_id": self.request_id,
            "path": self.path,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class PolyglotError(Exception):
    """
    Base exception for all Polyglot errors.

    Provides structured error handling with context and metadata.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        details: dict[str, Any] | None = None,
        user_friendly: str | None = None,
    ):
        """
        Initialize the error.

        Args:
            message: Technical error message (server-side only)
            context: Error context information
            details: Additional error details
            user_friendly: Message safe to return to the client
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.details = details or {}
        self.user_friendly = user_friendly or message
        self.timestamp = datetime.now(UTC)
        self.already_logged = False

        self._log_error()

    def _log_error(self) -> None:
        logger.error(
            "Polyglot error occurred",
            error_type=self.__class__.__name__,
            message=self.message,
            context=self.context.to_dict(),
            details=self.details,
        )
        self.already_logged = True

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for diagnostics."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "user_friendly": self.user_friendly,
            "context": self.context.to_dict(),
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class AuthenticationError(PolyglotError):
    """Authentication and authorization errors."""

    status_code = 401

    def __init__(self, message: str, context: ErrorContext | None = None, auth_type: str = "unknown", **kwargs):
        super().__init__(message, context, **kwargs)
        self.auth_type = auth_type
        self.details["auth_type"] = auth_type


class DatabaseError(PolyglotError):
    """Storage failures. The raw driver message stays in ``message``; clients only see ``user_friendly``."""

    status_code = 500

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        operation: str = "unknown",
        table: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.operation = operation
        self.table = table
        self.details["operation"] = operation
        if table:
            self.details["table"] = table


class ResourceNotFoundError(PolyglotError):
    """Resource not found errors."""

    status_code = 404

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        resource_type: str | None = None,
        resource_id: str | None = None,
        **kwargs,
    ):
        super().__init__(message, context, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_type:
            self.details["resource_type"] = resource_type
        if resource_id:
            self.details["resource_id"] = resource_id


class SessionStoreError(DatabaseError):
    """The session store could not load, save or destroy a session."""


def create_error_context(**kwargs) -> ErrorContext:
    """Create an error context with the given parameters."""
    return ErrorContext(**kwargs)
