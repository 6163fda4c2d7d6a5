"""
Logging processors for structlog event processing.

Sanitizes sensitive data and adds correlation and request context.
"""

import re
import uuid
from typing import Any

# Field names whose values must never reach a log file
_SENSITIVE_PATTERNS = [
    r"\bpassword\b",
    r"password_hash",
    r"\btoken\b",
    r"\bsecret\b",
    r"_secret\b",
    r"\bcookie\b",
    r"_key\b",
    r"^key$",
    r"\bcredential\b",
    r"\bauthorization\b",
]

_SAFE_FIELDS = {"cookie_name"}


def _sanitize_dict(d: dict[str, Any]) -> dict[str, Any]:
    sanitized: dict[str, Any] = {}
    for key, value in d.items():
        if isinstance(value, dict):
            sanitized[key] = _sanitize_dict(value)
            continue
        key_lower = str(key).lower()
        if key_lower in _SAFE_FIELDS:
            sanitized[key] = value
        elif any(re.search(pattern, key_lower) for pattern in _SENSITIVE_PATTERNS):
            sanitized[key] = "[REDACTED]"
        else:
            sanitized[key] = value
    return sanitized


def sanitize_sensitive_data(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Remove sensitive data from log entries.

    Passwords, hashes, session cookies and secrets are replaced with
    "[REDACTED]", recursively through nested dictionaries.

    Args:
        _logger: Logger instance (unused)
        _name: Logger name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Sanitized event dictionary
    """
    return _sanitize_dict(event_dict)


def add_correlation_id(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Add a correlation ID to log entries that are not bound to a request."""
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = str(uuid.uuid4())
    return event_dict
