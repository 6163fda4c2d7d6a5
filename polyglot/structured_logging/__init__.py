"""
Structured logging package for the Polyglot server.

Import loggers from enhanced_logging_config:

    from polyglot.structured_logging.enhanced_logging_config import get_logger
"""
