"""
Durable session store.

Sessions live in the ``sessions`` table keyed by a random id. Each successful
load slides the expiry window forward; an expired row is deleted the first
time it is read and is never returned.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ..database import DatabaseManager
from ..exceptions import SessionStoreError, create_error_context
from ..models.session import SessionRecord
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.db_errors import parse_database_error
from ..utils.error_logging import log_and_raise
from .state import SessionState

logger = get_logger(__name__)


def new_session_id() -> str:
    """Return an unguessable session identifier."""
    return secrets.token_urlsafe(32)


def _utcnow_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class SessionStore(Protocol):
    """Storage interface used by the session middleware and the realtime gateway."""

    async def load(self, session_id: str) -> SessionState | None: ...

    async def save(self, session_id: str, state: SessionState) -> None: ...

    async def destroy(self, session_id: str) -> None: ...


class SqlSessionStore:
    """
    SQLAlchemy-backed SessionStore.

    Args:
        database: DatabaseManager owning the engine
        max_age_seconds: Idle window after which a session expires
    """

    def __init__(self, database: DatabaseManager, max_age_seconds: int):
        self._database = database
        self.max_age = timedelta(seconds=max_age_seconds)

    def _fail(self, operation: str, session_id: str | None, error: SQLAlchemyError) -> None:
        context = create_error_context(session_id=session_id[:8] if session_id else None)
        context.metadata["operation"] = operation
        log_and_raise(
            SessionStoreError,
            f"Session store {operation} failed: {error}",
            context=context,
            details={"error": str(error)},
            user_friendly=parse_database_error(error),
            operation=operation,
            table="sessions",
        )

    async def load(self, session_id: str) -> SessionState | None:
        """
        Load a session and refresh its expiry.

        Returns:
            The stored state, or None if the session does not exist or has expired

        Raises:
            SessionStoreError: If the store cannot be read
        """
        now = _utcnow_naive()
        try:
            async with self._database.session() as db_session:
                record = await db_session.get(SessionRecord, session_id)
                if record is None:
                    return None
                if record.expires_at <= now:
                    await db_session.delete(record)
                    await db_session.commit()
                    logger.debug("Expired session removed on load", session_prefix=session_id[:8])
                    return None
                state = SessionState.from_storage(record.data)
                record.expires_at = now + self.max_age
                await db_session.commit()
                return state
        except SQLAlchemyError as e:
            self._fail("load", session_id, e)
        return None

    async def save(self, session_id: str, state: SessionState) -> None:
        """Insert or replace a session's state. Last write wins."""
        now = _utcnow_naive()
        try:
            async with self._database.session() as db_session:
                await db_session.merge(
                    SessionRecord(session_id=session_id, data=state.to_storage(), expires_at=now + self.max_age)
                )
                await db_session.commit()
        except SQLAlchemyError as e:
            self._fail("save", session_id, e)

    async def destroy(self, session_id: str) -> None:
        try:
            async with self._database.session() as db_session:
                await db_session.execute(delete(SessionRecord).where(SessionRecord.session_id == session_id))
                await db_session.commit()
        except SQLAlchemyError as e:
            self._fail("destroy", session_id, e)

    async def purge_expired(self) -> int:
        """Delete every expired session. Returns the number of rows removed."""
        now = _utcnow_naive()
        try:
            async with self._database.session() as db_session:
                result = await db_session.execute(
                    select(SessionRecord.session_id).where(SessionRecord.expires_at <= now)
                )
                expired = list(result.scalars().all())
                if expired:
                    await db_session.execute(delete(SessionRecord).where(SessionRecord.session_id.in_(expired)))
                    await db_session.commit()
        except SQLAlchemyError as e:
            self._fail("purge", None, e)
            return 0

        if expired:
            logger.info("Purged expired sessions", count=len(expired))
        return len(expired)
