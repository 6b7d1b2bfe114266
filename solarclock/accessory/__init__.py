from .types import AccessoryConfig, Location, Occurrence, SensorState, SolarConfig

__all__ = [
    AccessoryConfig.__name__,
    Location.__name__,
    Occurrence.__name__,
    SensorState.__name__,
    SolarConfig.__name__,
]
