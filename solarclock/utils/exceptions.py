class SolarClockError(Exception):
    """Base class for all solarclock errors"""


class InvalidLocationError(SolarClockError):
    """Latitude or longitude is missing, non-numeric or out of range"""


class InvalidPeriodError(SolarClockError):
    """Solar period index is outside the catalog"""


class InvalidConfigurationError(SolarClockError):
    """Accessory configuration or a requested value is malformed"""


class PersistenceError(SolarClockError):
    """The accessory state store failed to read or write"""


class ScheduleUnavailableError(SolarClockError):
    """No time could be resolved for the solar period today or tomorrow"""


class CharacteristicNotFoundError(SolarClockError):
    """The requested service or characteristic isn't exposed by the accessory"""


class SchedulerMisconfiguredError(SolarClockError):
    """JobScheduler was created without a background scheduler"""


class HomeAssistantClientError(SolarClockError):
    """Request to Home Assistant failed"""
