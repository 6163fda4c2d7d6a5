"""
Login lockout state machine.

Per session: ``Unlocked(attempts)`` counts consecutive failures; reaching the
threshold moves to ``Locked(until)`` with the counter reset. A lock whose
``until`` has passed behaves exactly like ``Unlocked(0)``.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..sessions.state import Locked, LockoutState, Unlocked
from ..utils.time_format import format_distance_to


@dataclass(frozen=True)
class LockoutPolicy:
    max_attempts: int = 5
    duration: timedelta = timedelta(minutes=3)


def active_lock(lockout: LockoutState, now: datetime) -> Locked | None:
    """Return the lock if it is still in force at ``now``."""
    if isinstance(lockout, Locked) and lockout.is_active(now):
        return lockout
    return None


def record_failure(lockout: LockoutState, now: datetime, policy: LockoutPolicy) -> LockoutState:
    """The lockout state after one more failed attempt."""
    attempts = lockout.attempts if isinstance(lockout, Unlocked) else 0
    attempts += 1
    if attempts >= policy.max_attempts:
        return Locked(until=now + policy.duration)
    return Unlocked(attempts=attempts)


def remaining_message(lock: Locked, now: datetime) -> str:
    """e.g. ``"You have 3 minutes remaining."``"""
    return f"You have {format_distance_to(lock.until, now)} remaining."
