"""
Authentication service: registration and lockout-aware login.

Login outcomes are ordinary return values rather than exceptions. Unknown
email and wrong password produce the same NOT_FOUND outcome so a client
cannot tell which one happened.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import IntEnum

from ..models.user import User
from ..persistence.repositories.user_repository import UserRepository
from ..sessions.state import SessionState
from ..structured_logging.enhanced_logging_config import get_logger
from .argon2_utils import hash_password_async, verify_dummy_password_async, verify_password_async
from .lockout import LockoutPolicy, active_lock, record_failure, remaining_message

logger = get_logger(__name__)


class LoginResult(IntEnum):
    """Login outcome, valued as the HTTP status it maps to."""

    OK = 200
    NOT_FOUND = 404
    THROTTLED = 429


@dataclass(frozen=True)
class LoginOutcome:
    result: LoginResult
    message: str | None = None
    user: User | None = None


class AuthService:
    """
    Registers users and logs them in against a session's lockout state.

    Args:
        user_repository: User persistence
        policy: Failed-attempt threshold and lock duration
    """

    def __init__(self, user_repository: UserRepository, policy: LockoutPolicy | None = None):
        self._users = user_repository
        self.policy = policy or LockoutPolicy()

    async def register_user(self, username: str, email: str, password: str) -> User:
        """
        Hash the password and persist a new user.

        Raises:
            DatabaseError: Duplicate email or storage failure, with a sanitized user_friendly message
        """
        password_hash = await hash_password_async(password)
        user = await self._users.add_user(username=username, email=email, password_hash=password_hash)
        logger.info("User registered", user_id=user.user_id)
        return user

    async def log_in(
        self, state: SessionState, email: str, password: str, now: datetime | None = None
    ) -> tuple[LoginOutcome, SessionState]:
        """
        Attempt a login.

        Returns:
            The outcome and the session state to store. A throttled or
            unknown-email attempt returns ``state`` unchanged.
        """
        now = now or datetime.now(UTC)

        lock = active_lock(state.lockout, now)
        if lock is not None:
            logger.info("Login throttled", locked_until=lock.until.isoformat())
            return LoginOutcome(LoginResult.THROTTLED, remaining_message(lock, now)), state

        user = await self._users.get_user_by_email(email)
        if user is None:
            await verify_dummy_password_async(password)
            logger.info("Login failed - unknown email")
            return LoginOutcome(LoginResult.NOT_FOUND), state

        if not await verify_password_async(password, user.password_hash):
            lockout = record_failure(state.lockout, now, self.policy)
            logger.info("Login failed - wrong password", user_id=user.user_id, lockout=lockout.kind)
            return LoginOutcome(LoginResult.NOT_FOUND), state.with_lockout(lockout)

        logger.info("Login succeeded", user_id=user.user_id)
        return LoginOutcome(LoginResult.OK, user=user), SessionState.authenticated(user.user_id, user.email)
