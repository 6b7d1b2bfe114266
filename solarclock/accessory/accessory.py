from collections.abc import Callable

from solarclock.accessory.occurrence import SolarTimes
from solarclock.accessory.scheduler import (
    ConfigStore,
    Scheduler,
    SetCallback,
    SolarScheduler,
    build_default_config,
)
from solarclock.accessory.types import AccessoryConfig, Location, SensorState
from solarclock.hap import (
    BridgeContext,
    Category,
    CharacteristicType,
    ContactSensorState,
    Service,
    ServiceType,
)
from solarclock.integrations.astronomy import SolarTimesProvider
from solarclock.integrations.redis import RedisClient
from solarclock.utils.exceptions import CharacteristicNotFoundError
from solarclock.utils.logging import log

MANUFACTURER = "The Homespun"
MODEL = "Switch"
SERIAL_NUMBER = "44"
LINK_QUALITY = 4

CONTACT_VALUES = {
    SensorState.NO_EVENT: ContactSensorState.CONTACT_DETECTED,
    SensorState.EVENT_ACTIVE: ContactSensorState.CONTACT_NOT_DETECTED,
}


class SolarClockAccessory:
    """Contact sensor that pulses at a solar period plus an offset"""

    def __init__(
        self,
        config: AccessoryConfig,
        storage: ConfigStore,
        job_scheduler: Scheduler,
        provider: SolarTimes | None = None,
        context: BridgeContext | None = None,
    ) -> None:
        self.context = context or BridgeContext()
        self.name = config.name
        self.version = config.version
        self.location = Location.parse(config.location)

        self.scheduler = SolarScheduler(
            name=self.name,
            location=self.location,
            storage=storage,
            job_scheduler=job_scheduler,
            provider=provider or SolarTimesProvider(self.context.solar_periods),
            catalog=self.context.solar_periods,
            job_id=RedisClient.build_key("solarclock", "solar", self.name),
            on_sensor_change=self._update_contact_sensor,
        )

        self._contact_sensor: Service | None = None
        self.scheduler.initialize(build_default_config(config, self.context.solar_periods))
        self._services = self.create_services()

    def get_services(self) -> list[Service]:
        return self._services

    def find_service(self, name: str) -> Service:
        """Look up a service by type (eg. `Solar`) or display name"""
        for service in self._services:
            if name in (service.type, service.display_name):
                return service
        raise CharacteristicNotFoundError(f"{self.name} has no service {name}")

    def create_services(self) -> list[Service]:
        return [
            self.get_accessory_information_service(),
            self.get_bridging_state_service(),
            self.get_solar_service(),
            self.get_solar_location_service(),
            self.get_enabled_switch_service(),
            self.get_contact_sensor_service(),
        ]

    def _service(self, type: ServiceType, display_name: str | None = None) -> Service:
        return self.context.service_factory(type, display_name)

    def get_accessory_information_service(self) -> Service:
        return (
            self._service(ServiceType.ACCESSORY_INFORMATION)
            .set_characteristic(CharacteristicType.NAME, self.name)
            .set_characteristic(CharacteristicType.MANUFACTURER, MANUFACTURER)
            .set_characteristic(CharacteristicType.MODEL, MODEL)
            .set_characteristic(CharacteristicType.SERIAL_NUMBER, SERIAL_NUMBER)
            .set_characteristic(CharacteristicType.FIRMWARE_REVISION, self.version)
            .set_characteristic(CharacteristicType.HARDWARE_REVISION, self.version)
        )

    def get_bridging_state_service(self) -> Service:
        return (
            self._service(ServiceType.BRIDGING_STATE)
            .set_characteristic(CharacteristicType.REACHABLE, True)
            .set_characteristic(CharacteristicType.LINK_QUALITY, LINK_QUALITY)
            .set_characteristic(CharacteristicType.ACCESSORY_IDENTIFIER, self.name)
            .set_characteristic(CharacteristicType.CATEGORY, Category.SWITCH)
        )

    def get_solar_service(self) -> Service:
        service = self._service(ServiceType.SOLAR, f"{self.name} Period")
        service.get_characteristic(CharacteristicType.SOLAR_PERIOD).on_set(
            self.scheduler.set_period
        ).update_value(self.scheduler.config.period)
        service.get_characteristic(CharacteristicType.SOLAR_MINUTES_OFFSET).on_set(
            self.scheduler.set_offset
        ).update_value(self.scheduler.config.offset)

        return service

    def get_solar_location_service(self) -> Service:
        return (
            self._service(ServiceType.SOLAR_LOCATION, f"{self.name} Location")
            .set_characteristic(CharacteristicType.SOLAR_LATITUDE, self.location.latitude)
            .set_characteristic(CharacteristicType.SOLAR_LONGITUDE, self.location.longitude)
        )

    def get_enabled_switch_service(self) -> Service:
        service = self._service(ServiceType.SWITCH, f"{self.name} Enabled")
        service.get_characteristic(CharacteristicType.ON).on_set(
            self.scheduler.set_enabled
        ).update_value(self.scheduler.config.enabled)
        service.is_primary_service = True

        return service

    def get_contact_sensor_service(self) -> Service:
        self._contact_sensor = self._service(ServiceType.CONTACT_SENSOR, f"{self.name} Solar")
        contact_state = self._contact_sensor.get_characteristic(
            CharacteristicType.CONTACT_SENSOR_STATE
        )
        contact_state.update_value(CONTACT_VALUES[self.scheduler.sensor_state])

        return self._contact_sensor

    def subscribe_contact_sensor(self, listener: Callable[[int], None]) -> None:
        self.find_service(ServiceType.CONTACT_SENSOR).get_characteristic(
            CharacteristicType.CONTACT_SENSOR_STATE
        ).subscribe(listener)

    def identify(self, callback: SetCallback) -> None:
        log.info("Identify requested", accessory=self.name)
        callback(None)

    def shutdown(self) -> None:
        self.scheduler.stop()

    def _update_contact_sensor(self, state: SensorState) -> None:
        if self._contact_sensor is None:
            return
        contact_state = self._contact_sensor.get_characteristic(
            CharacteristicType.CONTACT_SENSOR_STATE
        )
        contact_state.update_value(CONTACT_VALUES[state])
