from datetime import UTC, date, datetime, timedelta, tzinfo

from astral import Observer

from solarclock.accessory.periods import SOLAR_PERIODS, SolarPeriod
from solarclock.accessory.types import Location
from solarclock.config import TIMEZONE
from solarclock.utils.logging import log

ONE_DAY = timedelta(days=1)


class SolarTimesProvider:
    """Resolves the time of every catalog period for a calendar day at a location"""

    def __init__(
        self,
        catalog: tuple[SolarPeriod, ...] = SOLAR_PERIODS,
        timezone: tzinfo = TIMEZONE,
    ) -> None:
        self.catalog = catalog
        self.timezone = timezone

    def get_times(self, day: date, location: Location) -> dict[str, datetime]:
        """
        Map each period name to its time on `day`, where `day` is a calendar date in the
        provider's timezone rather than at the location.
        Periods that never happen on that date (polar day or night) are omitted.
        """
        observer = Observer(latitude=location.latitude, longitude=location.longitude)
        times: dict[str, datetime] = {}

        for period in self.catalog:
            moment = self._time_on(period, observer, day)
            if moment is None:
                log.debug("Solar period unavailable", period=period.name, day=day.isoformat())
                continue
            times[period.name] = moment

        return times

    def _time_on(self, period: SolarPeriod, observer: Observer, day: date) -> datetime | None:
        """
        astral anchors its results to the UTC date shifted by the observer's longitude, so a
        location far from the provider's timezone can land on the neighbouring local date.
        Evaluate the surrounding days and keep what falls on `day` locally.
        """
        candidates = []
        for query_day in (day - ONE_DAY, day, day + ONE_DAY):
            try:
                moment = period.calculate(observer, query_day, UTC).astimezone(self.timezone)
            except ValueError:
                continue
            if moment.date() == day:
                candidates.append(moment)

        return min(candidates, default=None)
