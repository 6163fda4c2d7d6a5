"""
Enhanced structlog-based logging configuration for the Polyglot server.

This is the entry point of the logging system: it wires the structlog
processor chain (security sanitization, context variables, timestamps) onto
stdlib logging and installs the file handlers.

All application code obtains loggers through get_logger() from this module.
"""

import json
import logging
import re
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.stdlib import BoundLogger, LoggerFactory

from polyglot.structured_logging.logging_context import bind_request_context, clear_request_context
from polyglot.structured_logging.logging_file_setup import setup_file_logging
from polyglot.structured_logging.logging_processors import add_correlation_id, sanitize_sensitive_data

__all__ = [
    "bind_request_context",
    "clear_request_context",
    "configure_enhanced_structlog",
    "get_logger",
    "log_exception_once",
    "setup_enhanced_logging",
]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class _LoggingState:
    """State container for logging initialization to avoid global statements."""

    initialized: bool = False
    signature: str | None = None


_logging_state = _LoggingState()


def _strip_ansi_renderer(bound_logger: Any, name: str, event_dict: dict[str, Any]) -> str:
    """Render key/value output with ANSI escape sequences removed."""
    formatted = structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"])(
        bound_logger, name, event_dict
    )
    return _ANSI_ESCAPE.sub("", formatted)


def configure_enhanced_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog with sanitization and context-variable support.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.getLogger().setLevel(logging.getLevelName(log_level.upper()))

    structlog.configure(
        processors=[
            # Security first - sanitize sensitive data
            sanitize_sensitive_data,
            merge_contextvars,
            add_correlation_id,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _strip_ansi_renderer,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )


def setup_enhanced_logging(config: dict[str, Any], *, force_reconfigure: bool = False) -> None:
    """
    Set up logging from the server configuration dictionary.

    Args:
        config: Server configuration dictionary (AppConfig.to_legacy_dict())
        force_reconfigure: When True, reconfigure even if already initialized
    """
    config_signature = json.dumps(config, sort_keys=True, default=str)
    if _logging_state.initialized and not force_reconfigure:
        get_logger("polyglot.structured_logging.setup").debug(
            "setup_enhanced_logging skipped; logging system already initialized",
            config_signature=_logging_state.signature,
        )
        return

    logging_config = config.get("logging", {})
    environment = logging_config.get("environment", "local")
    log_level = logging_config.get("level", "INFO")

    configure_enhanced_structlog(log_level)

    if logging_config.get("disable_logging", False):
        _logging_state.initialized = True
        _logging_state.signature = config_signature
        return

    env_log_dir = setup_file_logging(environment, logging_config, log_level)
    _configure_uvicorn_logging()

    get_logger("polyglot.structured_logging.enhanced").info(
        "Enhanced logging system initialized",
        environment=environment,
        log_level=log_level,
        log_dir=str(env_log_dir),
    )
    _logging_state.initialized = True
    _logging_state.signature = config_signature


def _configure_uvicorn_logging() -> None:
    """Route uvicorn's loggers through the root handlers."""
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Get a structlog logger with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def log_exception_once(
    bound_logger: BoundLogger,
    level: str,
    message: str,
    *,
    exc: Exception | None = None,
    **kwargs: Any,
) -> None:
    """
    Log an exception unless it has already been logged.

    PolyglotError instances log themselves on construction and carry an
    ``already_logged`` marker; anything else is logged and then marked.
    """
    if exc is not None:
        if getattr(exc, "already_logged", False):
            return
        kwargs.setdefault("error_type", type(exc).__name__)
        kwargs.setdefault("error", str(exc))

    log_method = getattr(bound_logger, level.lower(), bound_logger.error)
    log_method(message, **kwargs)

    if exc is not None:
        try:
            exc.already_logged = True  # type: ignore[attr-defined]
        except AttributeError:
            pass
