from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from threading import Lock, RLock
from typing import Any, Protocol

from solarclock.accessory.occurrence import SolarTimes, compute_next_occurrence
from solarclock.accessory.periods import SolarPeriod, resolve_period_index
from solarclock.accessory.types import (
    AccessoryConfig,
    Location,
    Occurrence,
    SensorState,
    SolarConfig,
)
from solarclock.utils.dates import IntervalSeconds, format_duration, local_now
from solarclock.utils.exceptions import (
    InvalidConfigurationError,
    InvalidPeriodError,
    PersistenceError,
    ScheduleUnavailableError,
)
from solarclock.utils.logging import log, start_process

SetCallback = Callable[[Exception | None], None]
SensorListener = Callable[[SensorState], None]

SILENCE_DELAY = timedelta(seconds=IntervalSeconds.ONE_SECOND)


class ConfigStore(Protocol):
    def retrieve(self, default: SolarConfig) -> SolarConfig: ...

    def store(self, config: SolarConfig) -> None: ...


class Scheduler(Protocol):
    def schedule_job(
        self,
        run_time: Any,
        func: Callable,
        func_params: dict | None = None,
        job_id: str | None = None,
    ) -> str: ...

    def cancel_job(self, job_id: str) -> None: ...


def build_default_config(config: AccessoryConfig, catalog: tuple[SolarPeriod, ...]) -> SolarConfig:
    """Defaults used when nothing has been persisted yet"""
    period = resolve_period_index(config.period, catalog)
    if period is None:
        log.warning(
            "Unknown solar period in config, falling back to the first period",
            accessory=config.name,
            configured_period=config.period,
            fallback_period=catalog[0].name,
        )
        period = 0

    return SolarConfig(period=period, offset=config.offset, enabled=config.enabled)


class SolarScheduler:
    """
    Arms a one-shot job for the next occurrence of the configured solar period and pulses
    the sensor when it fires: NO_EVENT -> EVENT_ACTIVE, then back to NO_EVENT after one second,
    then re-arms for the following occurrence.

    Config changes go through the setters, which persist a new snapshot before committing it.
    """

    def __init__(
        self,
        name: str,
        location: Location,
        storage: ConfigStore,
        job_scheduler: Scheduler,
        provider: SolarTimes,
        catalog: tuple[SolarPeriod, ...],
        job_id: str,
        on_sensor_change: SensorListener | None = None,
    ) -> None:
        self.name = name
        self.location = location
        self.storage = storage
        self.job_scheduler = job_scheduler
        self.provider = provider
        self.catalog = catalog
        self.job_id = job_id
        self.on_sensor_change = on_sensor_change

        self.config = SolarConfig()
        self.sensor_state = SensorState.NO_EVENT
        self.next_occurrence: Occurrence | None = None
        self._lock = RLock()
        self._publish_lock = Lock()

    @property
    def period(self) -> SolarPeriod:
        """The currently configured catalog entry"""
        return self.catalog[self.config.period]

    def initialize(self, default: SolarConfig) -> None:
        """Load the persisted snapshot (or `default`) and arm the first job if enabled"""
        try:
            config = self.storage.retrieve(default)
        except PersistenceError:
            log.exception("Failed to load accessory state, using defaults", accessory=self.name)
            config = default

        if not 0 <= config.period < len(self.catalog):
            log.warning(
                "Stored solar period out of range, using default",
                accessory=self.name,
                period=config.period,
            )
            config = replace(config, period=default.period)

        with self._lock:
            self.config = config
            log.info("Accessory state loaded", accessory=self.name, **config.to_dict())
            if self.config.enabled:
                self._arm()

    def set_period(self, index: int, callback: SetCallback) -> None:
        """Switch to the catalog period at `index`, persist, then re-arm"""
        if not isinstance(index, int) or isinstance(index, bool):
            callback(InvalidConfigurationError(f"Period must be an integer, got {index!r}"))
            return
        if not 0 <= index < len(self.catalog):
            callback(InvalidPeriodError(f"Period {index} is outside 0..{len(self.catalog) - 1}"))
            return

        log.info(
            "Change target period",
            accessory=self.name,
            period=index,
            period_name=self.catalog[index].name,
        )
        self.persist(replace(self.config, period=index), callback)

    def set_offset(self, minutes: int, callback: SetCallback) -> None:
        """Shift the trigger by `minutes` (negative means before the period)"""
        if not isinstance(minutes, int) or isinstance(minutes, bool):
            callback(InvalidConfigurationError(f"Offset must be an integer, got {minutes!r}"))
            return

        log.info("Change target offset", accessory=self.name, offset=minutes)
        self.persist(replace(self.config, offset=minutes), callback)

    def set_enabled(self, enabled: bool, callback: SetCallback) -> None:
        """Turn the daily trigger on or off"""
        if not isinstance(enabled, bool):
            callback(InvalidConfigurationError(f"Enabled must be a boolean, got {enabled!r}"))
            return

        log.info("Change enabled state", accessory=self.name, enabled=enabled)
        self.persist(replace(self.config, enabled=enabled), callback)

    def persist(self, new_config: SolarConfig, callback: SetCallback) -> None:
        """
        Store `new_config`, then commit it and re-arm.
        The callback is answered before the job is re-armed. On failure nothing changes.
        """
        with self._lock:
            try:
                self.storage.store(new_config)
            except PersistenceError as e:
                log.error("Failed to persist accessory state", accessory=self.name, error=str(e))
                callback(e)
                return

            self.config = new_config
            callback(None)

            self.restart_timer()

    def restart_timer(self) -> None:
        """Drop the armed job and arm again from the current config"""
        with self._lock:
            self.job_scheduler.cancel_job(self.job_id)
            self.next_occurrence = None

            if self.config.enabled:
                self._arm()

    def stop(self) -> None:
        """Cancel the armed job. A pending silence job still runs"""
        with self._lock:
            self.job_scheduler.cancel_job(self.job_id)
            self.next_occurrence = None

    def _arm(self) -> Occurrence | None:
        period = self.period
        try:
            occurrence = compute_next_occurrence(
                now=local_now(),
                location=self.location,
                period=period.name,
                offset_minutes=self.config.offset,
                provider=self.provider,
            )
        except ScheduleUnavailableError:
            log.exception("Unable to schedule solar timer", accessory=self.name, period=period.name)
            return None

        self.job_scheduler.schedule_job(
            run_time=occurrence.run_time,
            func=self._fire,
            func_params={"run_time": occurrence.run_time},
            job_id=self.job_id,
        )
        self.next_occurrence = occurrence

        log.info(
            "Raising next solar timer",
            accessory=self.name,
            period=period.name,
            run_time=occurrence.run_time.isoformat(),
            delay=format_duration(occurrence.delay),
        )
        return occurrence

    def _fire(self, run_time: datetime) -> None:
        fired_at = local_now()
        start_process("solar")
        with self._lock:
            log.info("Solar!", accessory=self.name, period=self.period.name)
            # a config change may already have armed the next occurrence
            if self.next_occurrence is not None and self.next_occurrence.run_time == run_time:
                self.next_occurrence = None

            self.sensor_state = SensorState.EVENT_ACTIVE
            self.job_scheduler.schedule_job(
                run_time=fired_at + SILENCE_DELAY,
                func=self._silence,
            )
        self._publish_sensor_state()

    def _silence(self) -> None:
        start_process("solar")
        with self._lock:
            log.info("Solar silenced!", accessory=self.name)
            self.sensor_state = SensorState.NO_EVENT

            if self.config.enabled and self.next_occurrence is None:
                self._arm()
        self._publish_sensor_state()

    def _publish_sensor_state(self) -> None:
        """
        Hand the current sensor state to the listener outside the scheduler lock.
        Listeners may be slow (HTTP mirrors), and always see the latest state, in order.
        """
        if self.on_sensor_change is None:
            return
        with self._publish_lock:
            self.on_sensor_change(self.sensor_state)
