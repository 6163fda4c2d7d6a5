"""SQLAlchemy models for the Polyglot server."""

from .base import Base
from .session import SessionRecord
from .user import User

__all__ = ["Base", "SessionRecord", "User"]
