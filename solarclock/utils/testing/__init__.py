from .mock_redis import MockRedisClient
from .mock_scheduler import MockJobScheduler, ScheduledJob
from .mock_solar_times import MockSolarTimes

__all__ = [
    MockRedisClient.__name__,
    MockJobScheduler.__name__,
    MockSolarTimes.__name__,
    ScheduledJob.__name__,
]
