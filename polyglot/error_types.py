"""
Centralized error types and response builders.

HTTP error bodies and realtime error events share one envelope so clients
parse both the same way.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorType(Enum):
    """Standardized error types for consistent categorization."""

    AUTHENTICATION_FAILED = "authentication_failed"
    INVALID_FORMAT = "invalid_format"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE_ERROR = "database_error"
    INTERNAL_ERROR = "internal_error"


class ErrorSeverity(Enum):
    """Error severity levels for logging and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorMessages:
    """User-facing messages. Never include driver or stack details here."""

    INVALID_FORMAT = "Message format is invalid"
    USER_NOT_FOUND = "User not found"
    INTERNAL_ERROR = "An unexpected error occurred"


def create_standard_error_response(
    error_type: ErrorType,
    message: str,
    user_friendly: str | None = None,
    details: dict[str, Any] | None = None,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
) -> dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        error_type: The type of error
        message: Error message
        user_friendly: User-friendly error message (optional)
        details: Additional error details (optional)
        severity: Error severity level (optional)

    Returns:
        Standardized error response dictionary
    """
    return {
        "error": {
            "type": error_type.value,
            "message": message,
            "user_friendly": user_friendly or message,
            "details": details or {},
            "severity": severity.value,
            "timestamp": datetime.now(UTC).isoformat(),
        }
    }


def create_websocket_error_response(
    error_type: ErrorType,
    message: str,
    user_friendly: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create the realtime ``error`` event payload."""
    return {
        "type": error_type.value,
        "message": message,
        "user_friendly": user_friendly or message,
        "details": details or {},
    }
