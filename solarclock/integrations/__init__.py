from .astronomy import SolarTimesProvider
from .home_assistant import ContactSensorMirror, HomeAssistantClient
from .redis import RedisClient
from .storage import AccessoryStorage

__all__ = [
    SolarTimesProvider.__name__,
    ContactSensorMirror.__name__,
    HomeAssistantClient.__name__,
    RedisClient.__name__,
    AccessoryStorage.__name__,
]
