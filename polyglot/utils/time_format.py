"""
Human-friendly duration wording.

Follows the thresholds of the usual "time ago" formatters: distances are
rounded to the nearest minute, under half a minute is "less than a minute",
and anything from 44.5 minutes is expressed in hours and then days.
"""

import math
from datetime import datetime, timedelta

_MINUTES_IN_DAY = 1440
_MINUTES_IN_MONTH = 43200


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_distance(delta: timedelta) -> str:
    """
    Describe a duration in words, e.g. ``"3 minutes"`` or ``"about 1 hour"``.

    Negative durations are described by their magnitude.
    """
    seconds = abs(delta.total_seconds())
    minutes = _round_half_up(seconds / 60)

    if seconds < 30:
        return "less than a minute"
    if minutes <= 1:
        return "1 minute"
    if minutes < 45:
        return f"{minutes} minutes"
    if minutes < 90:
        return "about 1 hour"
    if minutes < _MINUTES_IN_DAY:
        return f"about {_round_half_up(minutes / 60)} hours"
    if minutes < 2520:
        return "1 day"
    if minutes < _MINUTES_IN_MONTH:
        return f"{_round_half_up(minutes / _MINUTES_IN_DAY)} days"
    months = _round_half_up(minutes / _MINUTES_IN_MONTH)
    return "about 1 month" if months == 1 else f"{months} months"


def format_distance_to(target: datetime, now: datetime) -> str:
    """Describe the time between ``now`` and ``target``."""
    return format_distance(target - now)
