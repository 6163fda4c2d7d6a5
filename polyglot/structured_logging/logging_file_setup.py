"""
File logging setup for the enhanced logging system.

Creates rotating handlers under <log_base>/<environment>/: server.log receives
everything at the configured level, errors.log receives ERROR and above.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

_HANDLER_MARKER = "_polyglot_handler"


def resolve_log_base(log_base: str) -> Path:
    """Resolve the log base directory; relative paths are taken from the working directory."""
    path = Path(log_base)
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def _make_handler(path: Path, level: int, max_bytes: int, backup_count: int) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    setattr(handler, _HANDLER_MARKER, True)
    return handler


def remove_file_handlers() -> None:
    """Detach and close every handler previously installed by setup_file_logging()."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()


def setup_file_logging(environment: str, log_config: dict[str, Any], log_level: str) -> Path:
    """
    Install rotating file handlers on the root logger.

    Args:
        environment: Environment name, used as the log sub-directory
        log_config: Logging configuration dictionary
        log_level: Minimum level for server.log

    Returns:
        The directory the log files are written to
    """
    env_log_dir = resolve_log_base(log_config.get("log_base", "logs")) / environment
    env_log_dir.mkdir(parents=True, exist_ok=True)

    rotation = log_config.get("rotation", {})
    max_bytes = int(rotation.get("max_bytes", 10 * 1024 * 1024))
    backup_count = int(rotation.get("backup_count", 5))
    level = logging.getLevelName(log_level.upper())

    remove_file_handlers()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(_make_handler(env_log_dir / "server.log", level, max_bytes, backup_count))
    root_logger.addHandler(_make_handler(env_log_dir / "errors.log", logging.ERROR, max_bytes, backup_count))
    return env_log_dir
