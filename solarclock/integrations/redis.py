from typing import Any

import redis

from solarclock.config import REDIS_HOST, REDIS_PORT

KEY_SEPARATOR = ":"


def _expect(result: Any, *types: type) -> Any:
    if not isinstance(result, types):
        names = " | ".join(t.__name__ for t in types)
        raise TypeError(f"Expected `{names}` but got {type(result).__name__}")
    return result


class RedisClient:
    """
    Thin wrapper over redis-py for accessory state.
    Values never expire: a snapshot lives until the accessory overwrites it.
    """

    def __init__(self, client: redis.Redis | None = None) -> None:
        self.client = client or redis.Redis(
            host=REDIS_HOST,
            port=REDIS_PORT,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )

    def check_health(self) -> bool:
        """True when Redis answers a PING"""
        try:
            return bool(_expect(self.client.ping(), bool))
        except redis.RedisError:
            return False

    def get(self, key: str) -> str | None:
        """Read a string value, or None if the key is unset"""
        return _expect(self.client.get(key), str, type(None))  # type:ignore[no-any-return]

    def set(self, key: str, value: str) -> str | None:
        """Write `value` under `key` and return whatever it replaced"""
        previous = self.client.set(name=key, value=value, get=True)
        return _expect(previous, str, type(None))  # type:ignore[no-any-return]

    def delete(self, *keys: str) -> int:
        """Delete keys. Returns how many existed"""
        if not keys:
            return 0
        return int(_expect(self.client.delete(*keys), int))

    @classmethod
    def build_key(cls, *parts: str) -> str:
        """Join parts into a colon separated key"""
        return KEY_SEPARATOR.join(parts)
