from datetime import datetime, timedelta
from enum import IntEnum

from solarclock.config import TIMEZONE


class IntervalSeconds(IntEnum):
    ONE_SECOND = 1
    ONE_MINUTE = 60


def local_now() -> datetime:
    return datetime.now(TIMEZONE)


def format_duration(delta: timedelta) -> str:
    """Render a timedelta as a compact `1h 5m` style string"""
    total_minutes = round(delta.total_seconds() / IntervalSeconds.ONE_MINUTE)
    sign = "-" if total_minutes < 0 else ""
    hours, minutes = divmod(abs(total_minutes), 60)

    if hours:
        return f"{sign}{hours}h {minutes}m"
    return f"{sign}{minutes}m"
