import json
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum, auto
from pathlib import Path
from typing import Any, Self

from solarclock.utils.exceptions import InvalidConfigurationError, InvalidLocationError


class SensorState(StrEnum):
    NO_EVENT = auto()
    EVENT_ACTIVE = auto()


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if math.isnan(self.latitude) or abs(self.latitude) > 90:
            raise InvalidLocationError(f"Latitude out of range: {self.latitude}")
        if math.isnan(self.longitude) or abs(self.longitude) > 180:
            raise InvalidLocationError(f"Longitude out of range: {self.longitude}")

    @classmethod
    def parse(cls, raw: Sequence | Mapping | None) -> Self:
        """Build a location from a `[lat, lon]` pair or a latitude/longitude mapping"""
        if raw is None:
            raw = [0, 0]

        if isinstance(raw, Mapping):
            latitude, longitude = raw.get("latitude"), raw.get("longitude")
        elif isinstance(raw, Sequence) and not isinstance(raw, str) and len(raw) == 2:
            latitude, longitude = raw
        else:
            raise InvalidLocationError(f"Invalid location: {raw!r}")

        return cls(latitude=_to_float(latitude), longitude=_to_float(longitude))


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidLocationError(f"Invalid coordinate: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidLocationError(f"Invalid coordinate: {value!r}") from e


@dataclass(frozen=True)
class SolarConfig:
    """Snapshot of the persisted accessory state. Replaced wholesale, never mutated."""

    period: int = 0
    offset: int = 0
    enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"period": self.period, "offset": self.offset, "enabled": self.enabled}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        period, offset, enabled = data["period"], data["offset"], data["enabled"]

        if not isinstance(period, int) or isinstance(period, bool):
            raise TypeError(f"Expected `int` period but got {type(period).__name__}")
        if not isinstance(offset, int) or isinstance(offset, bool):
            raise TypeError(f"Expected `int` offset but got {type(offset).__name__}")
        if not isinstance(enabled, bool):
            raise TypeError(f"Expected `bool` enabled but got {type(enabled).__name__}")

        return cls(period=period, offset=offset, enabled=enabled)


@dataclass(frozen=True)
class Occurrence:
    run_time: datetime
    delay: timedelta


@dataclass
class AccessoryConfig:
    """Accessory settings supplied by the host at construction time"""

    name: str
    version: str = "1.0.0"
    location: Sequence | Mapping | None = None
    period: str = ""
    offset: int = 0
    enabled: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        data = dict(data)

        name = data.pop("name", None)
        if not isinstance(name, str) or not name:
            raise InvalidConfigurationError("Accessory config requires a `name`")

        offset = data.pop("offset", None) or 0
        if not isinstance(offset, int) or isinstance(offset, bool):
            raise InvalidConfigurationError(f"Offset must be an integer, got {offset!r}")

        enabled = data.pop("enabled", None)
        if enabled is not None and not isinstance(enabled, bool):
            raise InvalidConfigurationError(f"Enabled must be a boolean, got {enabled!r}")

        return cls(
            name=name,
            version=str(data.pop("version", None) or cls.version),
            location=data.pop("location", None),
            period=str(data.pop("period", None) or ""),
            offset=offset,
            enabled=bool(enabled),
            extra=data,
        )

    @classmethod
    def load(cls, path: Path) -> Self:
        """Read accessory settings from a JSON file"""
        try:
            data = json.loads(path.read_text())
        except FileNotFoundError as e:
            raise InvalidConfigurationError(f"Accessory config not found at {path}") from e
        except json.JSONDecodeError as e:
            raise InvalidConfigurationError(f"Accessory config at {path} isn't valid JSON") from e

        if not isinstance(data, dict):
            raise InvalidConfigurationError(f"Accessory config at {path} must be a JSON object")

        return cls.from_dict(data)
