"""
Ordered catalog of solar periods.
The index of a period is the value persisted and exposed on the SolarPeriod characteristic,
so entries must never be reordered.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from astral import Observer
from astral.sun import SunDirection, dawn, dusk, midnight, noon, sunrise, sunset, time_at_elevation

SolarTimeFunc = Callable[[Observer, date, tzinfo], datetime]

CIVIL_DEPRESSION = 6
NAUTICAL_DEPRESSION = 12
ASTRONOMICAL_DEPRESSION = 18
SUN_DISC_ELEVATION = -0.3
GOLDEN_HOUR_ELEVATION = 6


@dataclass(frozen=True)
class SolarPeriod:
    name: str
    calculate: SolarTimeFunc


def _at_elevation(elevation: float, direction: SunDirection) -> SolarTimeFunc:
    def calculate(observer: Observer, day: date, tz: tzinfo) -> datetime:
        return time_at_elevation(
            observer,
            elevation,
            date=day,
            direction=direction,
            tzinfo=tz,
            with_refraction=False,
        )

    return calculate


def _dawn(depression: float) -> SolarTimeFunc:
    def calculate(observer: Observer, day: date, tz: tzinfo) -> datetime:
        return dawn(observer, date=day, depression=depression, tzinfo=tz)

    return calculate


def _dusk(depression: float) -> SolarTimeFunc:
    def calculate(observer: Observer, day: date, tz: tzinfo) -> datetime:
        return dusk(observer, date=day, depression=depression, tzinfo=tz)

    return calculate


def _sunrise(observer: Observer, day: date, tz: tzinfo) -> datetime:
    return sunrise(observer, date=day, tzinfo=tz)


def _sunset(observer: Observer, day: date, tz: tzinfo) -> datetime:
    return sunset(observer, date=day, tzinfo=tz)


def _solar_noon(observer: Observer, day: date, tz: tzinfo) -> datetime:
    return noon(observer, date=day, tzinfo=tz)


def _nadir(observer: Observer, day: date, tz: tzinfo) -> datetime:
    return midnight(observer, date=day, tzinfo=tz)


SOLAR_PERIODS: tuple[SolarPeriod, ...] = (
    SolarPeriod("sunrise", _sunrise),
    SolarPeriod("sunriseEnd", _at_elevation(SUN_DISC_ELEVATION, SunDirection.RISING)),
    SolarPeriod("goldenHourEnd", _at_elevation(GOLDEN_HOUR_ELEVATION, SunDirection.RISING)),
    SolarPeriod("solarNoon", _solar_noon),
    SolarPeriod("goldenHour", _at_elevation(GOLDEN_HOUR_ELEVATION, SunDirection.SETTING)),
    SolarPeriod("sunsetStart", _at_elevation(SUN_DISC_ELEVATION, SunDirection.SETTING)),
    SolarPeriod("sunset", _sunset),
    SolarPeriod("dusk", _dusk(CIVIL_DEPRESSION)),
    SolarPeriod("nauticalDusk", _dusk(NAUTICAL_DEPRESSION)),
    SolarPeriod("night", _dusk(ASTRONOMICAL_DEPRESSION)),
    SolarPeriod("nadir", _nadir),
    SolarPeriod("nightEnd", _dawn(ASTRONOMICAL_DEPRESSION)),
    SolarPeriod("nauticalDawn", _dawn(NAUTICAL_DEPRESSION)),
    SolarPeriod("dawn", _dawn(CIVIL_DEPRESSION)),
)


def period_names(catalog: tuple[SolarPeriod, ...] = SOLAR_PERIODS) -> list[str]:
    return [period.name for period in catalog]


def resolve_period_index(
    name: str,
    catalog: tuple[SolarPeriod, ...] = SOLAR_PERIODS,
) -> int | None:
    """Case-insensitive lookup of a period name. Returns None when nothing matches"""
    wanted = name.strip().lower()
    for index, period in enumerate(catalog):
        if period.name.lower() == wanted:
            return index

    return None
