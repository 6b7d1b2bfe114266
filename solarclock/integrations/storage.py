import json
import re
from enum import StrEnum

import redis

from solarclock.accessory.types import SolarConfig
from solarclock.integrations.redis import RedisClient
from solarclock.utils.exceptions import PersistenceError
from solarclock.utils.logging import log


class CachePrefix(StrEnum):
    STATE = "SOLARCLOCK:STATE"


class AccessoryStorage:
    """Durable store for one accessory's SolarConfig snapshot"""

    def __init__(self, accessory_name: str, redis_client: RedisClient | None = None) -> None:
        self.redis_client = redis_client or RedisClient()
        self.key = RedisClient.build_key(CachePrefix.STATE, self.slugify(accessory_name))

    @staticmethod
    def slugify(name: str) -> str:
        return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_") or "accessory"

    def retrieve(self, default: SolarConfig) -> SolarConfig:
        """Return the last stored snapshot, or `default` if nothing usable is stored"""
        try:
            encoded = self.redis_client.get(self.key)
        except redis.RedisError as e:
            raise PersistenceError(f"Failed to read accessory state: {e}") from e

        if encoded is None:
            return default

        try:
            return SolarConfig.from_dict(json.loads(encoded))
        except (ValueError, KeyError, TypeError) as e:
            log.warning(
                "Discarding malformed stored accessory state",
                key=self.key,
                stored=encoded,
                error=str(e),
            )
            return default

    def store(self, config: SolarConfig) -> None:
        """Durably save a snapshot. Raises PersistenceError on failure"""
        try:
            self.redis_client.set(self.key, json.dumps(config.to_dict()))
        except redis.RedisError as e:
            raise PersistenceError(f"Failed to store accessory state: {e}") from e

        log.debug("Stored accessory state", key=self.key, state=config.to_dict())
