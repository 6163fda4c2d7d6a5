"""Integration tests for the SQL session store."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select, update

from polyglot.models.session import SessionRecord
from polyglot.sessions.state import Locked, SessionState, Unlocked
from polyglot.sessions.store import new_session_id


async def _expire(database, session_id: str) -> None:
    past = datetime.now(UTC).replace(tzinfo=None) - timedelta(seconds=1)
    async with database.session() as db_session:
        await db_session.execute(
            update(SessionRecord).where(SessionRecord.session_id == session_id).values(expires_at=past)
        )
        await db_session.commit()


async def _expires_at(database, session_id: str) -> datetime | None:
    async with database.session() as db_session:
        result = await db_session.execute(
            select(SessionRecord.expires_at).where(SessionRecord.session_id == session_id)
        )
        return result.scalar_one_or_none()


class TestSqlSessionStore:
    @pytest.mark.asyncio
    async def test_save_and_load(self, session_store):
        sid = new_session_id()
        state = SessionState().with_lockout(Unlocked(attempts=2))

        await session_store.save(sid, state)

        assert await session_store.load(sid) == state

    @pytest.mark.asyncio
    async def test_unknown_session(self, session_store):
        assert await session_store.load("missing") is None

    @pytest.mark.asyncio
    async def test_last_write_wins(self, session_store):
        sid = new_session_id()
        await session_store.save(sid, SessionState())
        await session_store.save(sid, SessionState.authenticated("u1", "a@x.com"))

        loaded = await session_store.load(sid)

        assert loaded.is_logged_in

    @pytest.mark.asyncio
    async def test_lockout_state_round_trips(self, session_store):
        sid = new_session_id()
        until = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)
        await session_store.save(sid, SessionState().with_lockout(Locked(until=until)))

        loaded = await session_store.load(sid)

        assert loaded.lockout == Locked(until=until)

    @pytest.mark.asyncio
    async def test_expired_session_is_deleted_on_load(self, session_store, database):
        sid = new_session_id()
        await session_store.save(sid, SessionState.authenticated("u1", "a@x.com"))
        await _expire(database, sid)

        assert await session_store.load(sid) is None
        assert await _expires_at(database, sid) is None

    @pytest.mark.asyncio
    async def test_load_slides_expiry(self, session_store, database):
        sid = new_session_id()
        await session_store.save(sid, SessionState())
        async with database.session() as db_session:
            await db_session.execute(
                update(SessionRecord)
                .where(SessionRecord.session_id == sid)
                .values(expires_at=datetime.now(UTC).replace(tzinfo=None) + timedelta(minutes=5))
            )
            await db_session.commit()

        await session_store.load(sid)

        remaining = await _expires_at(database, sid) - datetime.now(UTC).replace(tzinfo=None)
        assert remaining > timedelta(hours=7)

    @pytest.mark.asyncio
    async def test_destroy(self, session_store):
        sid = new_session_id()
        await session_store.save(sid, SessionState())

        await session_store.destroy(sid)

        assert await session_store.load(sid) is None

    @pytest.mark.asyncio
    async def test_purge_expired(self, session_store, database):
        live, stale = new_session_id(), new_session_id()
        await session_store.save(live, SessionState())
        await session_store.save(stale, SessionState())
        await _expire(database, stale)

        assert await session_store.purge_expired() == 1
        assert await session_store.load(live) is not None
        assert await _expires_at(database, stale) is None

    def test_session_ids_are_unique(self):
        assert len({new_session_id() for _ in range(100)}) == 100
