import atexit

from apscheduler.schedulers.background import BackgroundScheduler  # type:ignore[import-untyped]
from flask import Flask, request
from structlog.stdlib import get_logger

from solarclock.accessory.accessory import SolarClockAccessory
from solarclock.accessory.occurrence import SolarTimes
from solarclock.accessory.scheduler import Scheduler
from solarclock.accessory.types import AccessoryConfig
from solarclock.config import ACCESSORY_CONFIG_PATH, HOME_ASSISTANT_URL, TIMEZONE
from solarclock.integrations.home_assistant import ContactSensorMirror
from solarclock.integrations.redis import RedisClient
from solarclock.integrations.storage import AccessoryStorage
from solarclock.routes.accessory import accessory_routes
from solarclock.utils.logging import configure_logging
from solarclock.utils.scheduler import JobScheduler

configure_logging()
log = get_logger()


class SolarClockFlask(Flask):
    accessory: SolarClockAccessory
    redis_client: RedisClient
    scheduler: BackgroundScheduler | None = None

    def initialize_scheduler(self) -> JobScheduler:
        self.scheduler = BackgroundScheduler(timezone=TIMEZONE)
        self.scheduler.start()
        atexit.register(self.scheduler.shutdown)
        atexit.register(self.shutdown_handler)

        return JobScheduler(self.scheduler)

    def shutdown_handler(self) -> None:
        log.info("Shutting down accessory", accessory=self.accessory.name)
        self.accessory.shutdown()


def create_app(
    accessory_config: AccessoryConfig | None = None,
    job_scheduler: Scheduler | None = None,
    redis_client: RedisClient | None = None,
    provider: SolarTimes | None = None,
) -> SolarClockFlask:
    """Build the accessory and the HTTP surface the bridge dispatches into"""
    app = SolarClockFlask(__name__)

    accessory_config = accessory_config or AccessoryConfig.load(ACCESSORY_CONFIG_PATH)
    job_scheduler = job_scheduler or app.initialize_scheduler()
    app.redis_client = redis_client or RedisClient()

    app.accessory = SolarClockAccessory(
        config=accessory_config,
        storage=AccessoryStorage(accessory_config.name, app.redis_client),
        job_scheduler=job_scheduler,
        provider=provider,
    )
    if HOME_ASSISTANT_URL:
        app.accessory.subscribe_contact_sensor(ContactSensorMirror(accessory_config.name))

    app.register_blueprint(accessory_routes)

    @app.before_request
    def log_request() -> None:
        log.info("Request received", path=request.path, method=request.method)

    log.info("Accessory ready", accessory=accessory_config.name)

    return app
