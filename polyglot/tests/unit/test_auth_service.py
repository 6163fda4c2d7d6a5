"""
Tests for the lockout-aware login flow.

The repository is mocked; password hashing is real (with cheap Argon2
parameters from conftest) so verification behaves as in production.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from polyglot.auth.argon2_utils import hash_password
from polyglot.auth.service import AuthService, LoginResult
from polyglot.sessions.state import Locked, SessionState, Unlocked

T0 = datetime(2026, 4, 2, 9, 0, 0, tzinfo=UTC)


@pytest.fixture
def stored_user():
    user = MagicMock()
    user.user_id = "7c1e6c8e-0000-4000-8000-000000000001"
    user.email = "a@x.com"
    user.password_hash = hash_password("correct")
    return user


@pytest.fixture
def repository(stored_user):
    repo = MagicMock()

    async def by_email(email):
        return stored_user if email == stored_user.email else None

    repo.get_user_by_email = AsyncMock(side_effect=by_email)
    repo.add_user = AsyncMock()
    return repo


@pytest.fixture
def service(repository):
    return AuthService(repository)


class TestLogIn:
    """Login outcomes and the session state they produce."""

    @pytest.mark.asyncio
    async def test_valid_credentials_replace_state(self, service, stored_user):
        state = SessionState().with_lockout(Unlocked(attempts=3))

        outcome, new_state = await service.log_in(state, "a@x.com", "correct", T0)

        assert outcome.result is LoginResult.OK
        assert outcome.user is stored_user
        assert new_state.is_logged_in
        assert new_state.authenticated_user.user_id == stored_user.user_id
        assert new_state.lockout == Unlocked(attempts=0)

    @pytest.mark.asyncio
    async def test_unknown_email_leaves_state_unchanged(self, service):
        state = SessionState().with_lockout(Unlocked(attempts=2))

        outcome, new_state = await service.log_in(state, "nobody@x.com", "whatever", T0)

        assert outcome.result is LoginResult.NOT_FOUND
        assert new_state == state

    @pytest.mark.asyncio
    async def test_unknown_email_still_runs_password_verification(self, service):
        with patch("polyglot.auth.service.verify_dummy_password_async", new=AsyncMock(return_value=False)) as dummy:
            outcome, _ = await service.log_in(SessionState(), "nobody@x.com", "whatever", T0)

        dummy.assert_awaited_once_with("whatever")
        assert outcome.result is LoginResult.NOT_FOUND

    @pytest.mark.asyncio
    async def test_wrong_password_counts_attempt(self, service):
        outcome, new_state = await service.log_in(SessionState(), "a@x.com", "wrong", T0)

        assert outcome.result is LoginResult.NOT_FOUND
        assert new_state.lockout == Unlocked(attempts=1)
        assert not new_state.is_logged_in

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_look_identical(self, service):
        unknown, _ = await service.log_in(SessionState(), "nobody@x.com", "wrong", T0)
        wrong, _ = await service.log_in(SessionState(), "a@x.com", "wrong", T0)

        assert unknown.result == wrong.result
        assert unknown.message == wrong.message
        assert unknown.user is None and wrong.user is None

    @pytest.mark.asyncio
    async def test_fifth_failure_locks_and_resets_counter(self, service):
        state = SessionState()
        for _ in range(5):
            _, state = await service.log_in(state, "a@x.com", "wrong", T0)

        assert isinstance(state.lockout, Locked)
        assert state.lockout.until == T0 + timedelta(minutes=3)

    @pytest.mark.asyncio
    async def test_lockout_scenario(self, service, repository):
        """Five failures, then wrong at T+1s is throttled, then correct at T+4min succeeds."""
        state = SessionState()
        for _ in range(5):
            outcome, state = await service.log_in(state, "a@x.com", "wrong", T0)
            assert outcome.result is LoginResult.NOT_FOUND

        throttled, after_throttle = await service.log_in(state, "a@x.com", "wrong", T0 + timedelta(seconds=1))
        assert throttled.result is LoginResult.THROTTLED
        assert throttled.message == "You have 3 minutes remaining."
        assert after_throttle == state

        outcome, state = await service.log_in(state, "a@x.com", "correct", T0 + timedelta(minutes=4))
        assert outcome.result is LoginResult.OK
        assert state.is_logged_in

    @pytest.mark.asyncio
    async def test_correct_password_is_throttled_while_locked(self, service, repository):
        state = SessionState().with_lockout(Locked(until=T0 + timedelta(minutes=3)))
        repository.get_user_by_email.reset_mock()

        outcome, new_state = await service.log_in(state, "a@x.com", "correct", T0 + timedelta(minutes=1))

        assert outcome.result is LoginResult.THROTTLED
        assert new_state == state
        repository.get_user_by_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_throttled_attempt_never_extends_lock(self, service):
        until = T0 + timedelta(minutes=3)
        state = SessionState().with_lockout(Locked(until=until))

        for seconds in (10, 60, 170):
            _, state = await service.log_in(state, "a@x.com", "wrong", T0 + timedelta(seconds=seconds))

        assert state.lockout == Locked(until=until)

    @pytest.mark.asyncio
    async def test_expired_lock_behaves_as_unlocked(self, service):
        state = SessionState().with_lockout(Locked(until=T0))

        outcome, new_state = await service.log_in(state, "a@x.com", "wrong", T0 + timedelta(seconds=1))

        assert outcome.result is LoginResult.NOT_FOUND
        assert new_state.lockout == Unlocked(attempts=1)


class TestRegisterUser:
    @pytest.mark.asyncio
    async def test_password_is_hashed_before_storage(self, service, repository):
        created = MagicMock(user_id="new-id")
        repository.add_user.return_value = created

        result = await service.register_user("Ana", "ana@x.com", "plain-text")

        assert result is created
        kwargs = repository.add_user.await_args.kwargs
        assert kwargs["username"] == "Ana"
        assert kwargs["email"] == "ana@x.com"
        assert kwargs["password_hash"].startswith("$argon2id$")
        assert kwargs["password_hash"] != "plain-text"
