"""
Typed session state.

A session's state is two orthogonal parts:

- identity: ``Anonymous`` or ``Authenticated(user_id, email)``
- lockout: ``Unlocked(attempts)`` or ``Locked(until)``

Both are discriminated unions, so "logged in" and "has a lockout timeout" are
read from the shape of the data rather than from loosely related flags. The
state is immutable; every transition returns a new SessionState.
"""

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class AuthenticatedUser(BaseModel):
    """The identity recorded after a successful login."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str


class Anonymous(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["anonymous"] = "anonymous"


class Authenticated(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["authenticated"] = "authenticated"
    user: AuthenticatedUser


class Unlocked(BaseModel):
    """Counting failed attempts; ``attempts`` is always below the lockout threshold."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unlocked"] = "unlocked"
    attempts: int = Field(default=0, ge=0)


class Locked(BaseModel):
    """Login attempts are refused until ``until`` (UTC)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["locked"] = "locked"
    until: datetime

    @field_validator("until")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    def is_active(self, now: datetime) -> bool:
        return now < self.until


Identity = Annotated[Anonymous | Authenticated, Field(discriminator="kind")]
LockoutState = Annotated[Unlocked | Locked, Field(discriminator="kind")]


class SessionState(BaseModel):
    """Everything the server keeps for one session."""

    model_config = ConfigDict(frozen=True)

    identity: Identity = Field(default_factory=Anonymous)
    lockout: LockoutState = Field(default_factory=Unlocked)

    @property
    def is_logged_in(self) -> bool:
        return isinstance(self.identity, Authenticated)

    @property
    def authenticated_user(self) -> AuthenticatedUser | None:
        if isinstance(self.identity, Authenticated):
            return self.identity.user
        return None

    @classmethod
    def authenticated(cls, user_id: str, email: str) -> "SessionState":
        """A fresh state holding only the given identity: no attempts, no timeout."""
        return cls(identity=Authenticated(user=AuthenticatedUser(user_id=user_id, email=email)))

    def with_lockout(self, lockout: Unlocked | Locked) -> "SessionState":
        return self.model_copy(update={"lockout": lockout})

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_storage(cls, data: dict[str, Any] | None) -> "SessionState":
        """
        Rebuild state from its stored JSON.

        Unreadable data yields a fresh anonymous state, never an authenticated one.
        """
        if not data:
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.warning("Discarding unreadable session data", error=str(e))
            return cls()
