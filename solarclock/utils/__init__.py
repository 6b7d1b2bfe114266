from .dates import IntervalSeconds, format_duration, local_now
from .logging import log
from .scheduler import JobScheduler

__all__ = [
    IntervalSeconds.__name__,
    local_now.__name__,
    format_duration.__name__,
    "log",
    JobScheduler.__name__,
]
