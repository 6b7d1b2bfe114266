"""
Minimal service & characteristic surface the bridge runtime talks to.
The bridge reads values, dispatches "set" requests and subscribes to value changes.
Accessories receive their constructors through a BridgeContext.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import Any

from solarclock.accessory.periods import SOLAR_PERIODS, SolarPeriod
from solarclock.utils.exceptions import CharacteristicNotFoundError

SetCallback = Callable[[Exception | None], None]
SetHandler = Callable[[Any, SetCallback], None]
ChangeListener = Callable[[Any], None]


class ServiceType(StrEnum):
    ACCESSORY_INFORMATION = "AccessoryInformation"
    BRIDGING_STATE = "BridgingState"
    SOLAR = "Solar"
    SOLAR_LOCATION = "SolarLocation"
    SWITCH = "Switch"
    CONTACT_SENSOR = "ContactSensor"


class CharacteristicType(StrEnum):
    NAME = "Name"
    MANUFACTURER = "Manufacturer"
    MODEL = "Model"
    SERIAL_NUMBER = "SerialNumber"
    FIRMWARE_REVISION = "FirmwareRevision"
    HARDWARE_REVISION = "HardwareRevision"
    REACHABLE = "Reachable"
    LINK_QUALITY = "LinkQuality"
    ACCESSORY_IDENTIFIER = "AccessoryIdentifier"
    CATEGORY = "Category"
    SOLAR_PERIOD = "SolarPeriod"
    SOLAR_MINUTES_OFFSET = "SolarMinutesOffset"
    SOLAR_LATITUDE = "SolarLatitude"
    SOLAR_LONGITUDE = "SolarLongitude"
    ON = "On"
    CONTACT_SENSOR_STATE = "ContactSensorState"


class ContactSensorState(IntEnum):
    CONTACT_DETECTED = 0
    CONTACT_NOT_DETECTED = 1


class Category(IntEnum):
    BRIDGE = 2
    SWITCH = 8
    SENSOR = 10


class Characteristic:
    def __init__(self, type: CharacteristicType, value: Any = None) -> None:
        self.type = type
        self.value = value
        self._set_handler: SetHandler | None = None
        self._listeners: list[ChangeListener] = []

    def on_set(self, handler: SetHandler) -> "Characteristic":
        self._set_handler = handler
        return self

    def subscribe(self, listener: ChangeListener) -> "Characteristic":
        self._listeners.append(listener)
        return self

    @property
    def writable(self) -> bool:
        return self._set_handler is not None

    def update_value(self, value: Any) -> "Characteristic":
        """Push a value from the accessory side and notify subscribers"""
        changed = value != self.value
        self.value = value
        if changed:
            for listener in self._listeners:
                listener(value)
        return self

    def handle_set(self, value: Any) -> Exception | None:
        """
        Dispatch a user "set" request to the accessory.
        The displayed value only changes when the handler reports success.
        """
        if self._set_handler is None:
            return PermissionError(f"Characteristic {self.type} is read only")

        outcome: list[Exception | None] = []
        self._set_handler(value, outcome.append)

        if not outcome:
            return RuntimeError(f"Set handler for {self.type} never completed")
        if (error := outcome[0]) is None:
            self.update_value(value)
        return error


class Service:
    def __init__(self, type: ServiceType, display_name: str | None = None) -> None:
        self.type = type
        self.display_name = display_name or str(type)
        self.is_primary_service = False
        self._characteristics: dict[CharacteristicType, Characteristic] = {}

    def get_characteristic(self, type: CharacteristicType) -> Characteristic:
        """Return the characteristic, creating it on first access"""
        if type not in self._characteristics:
            self._characteristics[type] = Characteristic(type)
        return self._characteristics[type]

    def set_characteristic(self, type: CharacteristicType, value: Any) -> "Service":
        self.get_characteristic(type).update_value(value)
        return self

    def find_characteristic(self, type: str) -> Characteristic:
        for characteristic_type, characteristic in self._characteristics.items():
            if characteristic_type == type:
                return characteristic
        raise CharacteristicNotFoundError(f"{self.type} has no characteristic {type}")

    @property
    def characteristics(self) -> list[Characteristic]:
        return list(self._characteristics.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.type),
            "display_name": self.display_name,
            "primary": self.is_primary_service,
            "characteristics": {
                str(c.type): {"value": c.value, "writable": c.writable}
                for c in self.characteristics
            },
        }


@dataclass
class BridgeContext:
    """Bridge-supplied constructors and the solar period catalog"""

    service_factory: Callable[[ServiceType, str | None], Service] = Service
    solar_periods: tuple[SolarPeriod, ...] = field(default=SOLAR_PERIODS)
