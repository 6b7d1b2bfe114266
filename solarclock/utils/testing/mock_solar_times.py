"""Deterministic solar times provider for testing without astral."""

from datetime import date, datetime, time

from solarclock.accessory.types import Location
from solarclock.config import TIMEZONE


class MockSolarTimes:
    """
    Returns the same wall-clock time every day for each configured period.
    Periods listed in `unavailable` are omitted, optionally only for specific days.
    """

    def __init__(
        self,
        times: dict[str, time] | None = None,
        unavailable: dict[str, set[date] | None] | None = None,
    ) -> None:
        self.times = times or {
            "sunrise": time(6, 0),
            "solarNoon": time(12, 0),
            "sunset": time(18, 0),
        }
        self.unavailable = unavailable or {}
        self.requested_days: list[date] = []

    def get_times(self, day: date, location: Location) -> dict[str, datetime]:
        self.requested_days.append(day)
        result = {}
        for period, clock_time in self.times.items():
            if period in self.unavailable:
                days = self.unavailable[period]
                if days is None or day in days:
                    continue
            result[period] = datetime.combine(day, clock_time, tzinfo=TIMEZONE)

        return result
