"""Tests for the login lockout state machine."""

from datetime import UTC, datetime, timedelta

from polyglot.auth.lockout import LockoutPolicy, active_lock, record_failure, remaining_message
from polyglot.sessions.state import Locked, Unlocked

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


class TestRecordFailure:
    """Failed attempts advance the counter and eventually lock."""

    def test_first_failure_counts_one(self):
        assert record_failure(Unlocked(), NOW, LockoutPolicy()) == Unlocked(attempts=1)

    def test_fourth_failure_stays_unlocked(self):
        assert record_failure(Unlocked(attempts=3), NOW, LockoutPolicy()) == Unlocked(attempts=4)

    def test_fifth_failure_locks_for_three_minutes(self):
        result = record_failure(Unlocked(attempts=4), NOW, LockoutPolicy())

        assert isinstance(result, Locked)
        assert result.until == NOW + timedelta(minutes=3)

    def test_five_consecutive_failures_from_fresh_state_lock(self):
        lockout = Unlocked()
        for _ in range(5):
            lockout = record_failure(lockout, NOW, LockoutPolicy())

        assert isinstance(lockout, Locked)

    def test_expired_lock_counts_from_zero(self):
        expired = Locked(until=NOW - timedelta(seconds=1))

        assert record_failure(expired, NOW, LockoutPolicy()) == Unlocked(attempts=1)

    def test_custom_policy_threshold(self):
        policy = LockoutPolicy(max_attempts=2, duration=timedelta(minutes=10))

        first = record_failure(Unlocked(), NOW, policy)
        second = record_failure(first, NOW, policy)

        assert first == Unlocked(attempts=1)
        assert isinstance(second, Locked)
        assert second.until == NOW + timedelta(minutes=10)


class TestActiveLock:
    def test_unlocked_has_no_active_lock(self):
        assert active_lock(Unlocked(attempts=4), NOW) is None

    def test_lock_in_future_is_active(self):
        lock = Locked(until=NOW + timedelta(minutes=2))
        assert active_lock(lock, NOW) is lock

    def test_lock_expires_exactly_at_until(self):
        assert active_lock(Locked(until=NOW), NOW) is None

    def test_naive_until_is_treated_as_utc(self):
        lock = Locked(until=(NOW + timedelta(minutes=1)).replace(tzinfo=None))
        assert active_lock(lock, NOW) is lock


class TestRemainingMessage:
    def test_three_minutes_just_after_locking(self):
        lock = Locked(until=NOW + timedelta(minutes=3))
        assert remaining_message(lock, NOW + timedelta(seconds=1)) == "You have 3 minutes remaining."

    def test_under_half_a_minute(self):
        lock = Locked(until=NOW + timedelta(seconds=20))
        assert remaining_message(lock, NOW) == "You have less than a minute remaining."
