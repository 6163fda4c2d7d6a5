"""
User account model.

TYPING NOTE: Uses SQLAlchemy 2.0 Mapped[] annotations.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def _utcnow() -> datetime:
    # Persist naive UTC
    return datetime.now(UTC).replace(tzinfo=None)


class User(Base):
    """A registered account. The password is only ever stored as an Argon2id hash."""

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("friend_count >= 0", name="friend_count_non_negative"),)

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    friend_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(DateTime(), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=_utcnow, onupdate=_utcnow, nullable=False)

    def to_public_dict(self) -> dict:
        """Client-facing representation; never includes the password hash."""
        return {
            "userId": self.user_id,
            "userName": self.username,
            "email": self.email,
            "friendCount": self.friend_count,
        }

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, email={self.email})>"
