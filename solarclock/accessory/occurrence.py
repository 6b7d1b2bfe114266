from datetime import date, datetime, timedelta
from typing import Protocol

from solarclock.accessory.types import Location, Occurrence
from solarclock.utils.exceptions import ScheduleUnavailableError
from solarclock.utils.logging import log


class SolarTimes(Protocol):
    def get_times(self, day: date, location: Location) -> dict[str, datetime]: ...


def compute_next_occurrence(
    now: datetime,
    location: Location,
    period: str,
    offset_minutes: int,
    provider: SolarTimes,
) -> Occurrence:
    """
    Find the next instant strictly after `now` at which `period` plus the offset occurs.
    Only today and tomorrow are considered.
    """
    offset = timedelta(minutes=offset_minutes)
    today = now.date()

    for day in (today, today + timedelta(days=1)):
        raw_time = provider.get_times(day, location).get(period)
        if raw_time is None:
            log.warning("Solar period has no time on this day", period=period, day=day.isoformat())
            continue

        run_time = raw_time + offset
        if run_time > now:
            return Occurrence(run_time=run_time, delay=run_time - now)

    raise ScheduleUnavailableError(
        f"No upcoming time for {period} at {location.latitude},{location.longitude} "
        f"with offset {offset_minutes}m"
    )
