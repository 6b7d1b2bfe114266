"""Pytest fixtures for testing solarclock accessories."""

from collections.abc import Generator
from datetime import datetime
from typing import Any

import pytest
from freezegun import freeze_time

from solarclock.accessory.accessory import SolarClockAccessory
from solarclock.accessory.types import AccessoryConfig
from solarclock.config import TIMEZONE
from solarclock.integrations.storage import AccessoryStorage
from solarclock.utils.testing.mock_redis import MockRedisClient
from solarclock.utils.testing.mock_scheduler import MockJobScheduler, ScheduledJob
from solarclock.utils.testing.mock_solar_times import MockSolarTimes

DEFAULT_ACCESSORY_NAME = "Test Clock"


class SolarClockTestContext:
    """
    Test context providing access to the mock collaborators of an accessory.

    Mocks replace Redis, APScheduler and the astral provider so tests can step
    through the timer lifecycle deterministically.
    """

    def __init__(
        self,
        redis_client: MockRedisClient,
        scheduler: MockJobScheduler,
        solar_times: MockSolarTimes,
    ) -> None:
        self.redis = redis_client
        self.scheduler = scheduler
        self.solar_times = solar_times

    def storage(self, name: str = DEFAULT_ACCESSORY_NAME) -> AccessoryStorage:
        return AccessoryStorage(name, self.redis)  # type:ignore[arg-type]

    def build_accessory(self, **config: Any) -> SolarClockAccessory:
        """
        Build an accessory wired to the mocks. Keyword args override the accessory config.

        Example:
            >>> context.build_accessory(period="sunset", enabled=True)
        """
        config.setdefault("name", DEFAULT_ACCESSORY_NAME)
        config.setdefault("location", [0, 0])
        config.setdefault("period", "sunset")
        accessory_config = AccessoryConfig.from_dict(config)

        return SolarClockAccessory(
            config=accessory_config,
            storage=self.storage(accessory_config.name),
            job_scheduler=self.scheduler,
            provider=self.solar_times,
        )

    def solar_job(self, accessory: SolarClockAccessory) -> ScheduledJob | None:
        return self.scheduler.get_job(accessory.scheduler.job_id)

    def silence_jobs(self) -> list[ScheduledJob]:
        return self.scheduler.find_jobs("._silence")

    @staticmethod
    def freeze_at(frozen_time: datetime | str) -> Any:
        """Wrapper around freeze_time that treats naive times as local to TIMEZONE."""
        if isinstance(frozen_time, str):
            frozen_time = datetime.fromisoformat(frozen_time)

        if frozen_time.tzinfo is None:
            frozen_time = frozen_time.replace(tzinfo=TIMEZONE)

        return freeze_time(frozen_time)


@pytest.fixture
def sct() -> Generator[SolarClockTestContext]:
    """
    Main pytest fixture providing a clean mocked context for each test.

    Usage:
        def test_pulse(sct):
            with sct.freeze_at("2025-06-01 17:00"):
                accessory = sct.build_accessory(period="sunset", enabled=True)
                ...
    """
    context = SolarClockTestContext(
        redis_client=MockRedisClient(),
        scheduler=MockJobScheduler(),
        solar_times=MockSolarTimes(),
    )

    yield context

    context.scheduler.clear()
    context.redis.data.clear()
