"""
Server-side session record.

The cookie only carries the signed session id; the state itself lives here.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SessionRecord(Base):
    """One row per live session. ``expires_at`` is naive UTC and slides forward on every access."""

    __tablename__ = "sessions"

    session_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    expires_at: Mapped[datetime] = mapped_column(DateTime(), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<SessionRecord(session_id={self.session_id[:8]}..., expires_at={self.expires_at})>"
