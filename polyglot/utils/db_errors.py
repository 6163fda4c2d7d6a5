"""
Translation of storage exceptions into client-safe messages.

Driver messages name tables, columns and constraint internals; only the
wording produced here may leave the server.
"""

from sqlalchemy.exc import IntegrityError, OperationalError

GENERIC_DATABASE_MESSAGE = "A storage error occurred, please try again later"


def parse_database_error(error: BaseException) -> str:
    """
    Map a storage exception to a sanitized, user-facing message.

    Args:
        error: The exception raised by SQLAlchemy or the database driver

    Returns:
        A message that reveals nothing about schema or driver internals
    """
    if isinstance(error, IntegrityError):
        raw = str(error.orig if error.orig is not None else error).lower()
        if "unique" in raw or "duplicate" in raw:
            if "email" in raw:
                return "That email address is already in use"
            return "That value is already in use"
        if "not null" in raw or "null value" in raw:
            return "A required field was missing"
        if "check constraint" in raw:
            return "A field has an invalid value"
        return "The data conflicts with an existing record"
    if isinstance(error, OperationalError):
        return "The database is temporarily unavailable"
    return GENERIC_DATABASE_MESSAGE
