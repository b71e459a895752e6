"""Redis access for ephemeral auth state.

Holds refresh-token sessions, login-attempt counters and rate-limit
windows.  Route handlers run synchronously in FastAPI's thread pool, so
the blocking ``redis.Redis`` client (with its own connection pool) is
used rather than ``redis.asyncio``.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any

from redis import Redis

from app.config import get_settings

logger = logging.getLogger(__name__)


class RedisCache:
    """Thin JSON-over-Redis wrapper.

    Every write carries a TTL; nothing in this store is meant to outlive
    the session or window it belongs to.
    """

    def __init__(self, client: Redis):
        self.client = client

    @classmethod
    def from_url(cls, redis_url: str, *, socket_timeout: float = 5.0) -> "RedisCache":
        client = Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    def ping(self) -> bool:
        return bool(self.client.ping())

    def get_json(self, key: str) -> Any | None:
        raw = self.client.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            # Corrupted entry - treat as a miss
            logger.warning("Discarding unreadable cache entry '%s'", key)
            return None

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        self.client.set(key, json.dumps(value), ex=max(1, int(ttl_seconds)))

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def expire(self, key: str, ttl_seconds: int) -> bool:
        """Shorten (or extend) the lifetime of an existing key."""
        return bool(self.client.expire(key, max(1, int(ttl_seconds))))

    def ttl(self, key: str) -> int:
        """Remaining seconds for *key*; negative when missing or persistent."""
        return int(self.client.ttl(key))

    def hit(self, key: str, window_seconds: int) -> tuple[int, int]:
        """Count one hit in a fixed window.

        Returns:
            ``(count, seconds_until_reset)`` after recording the hit.
        """
        pipe = self.client.pipeline()
        # Starts the window only if no counter exists yet
        pipe.set(key, 0, ex=max(1, int(window_seconds)), nx=True)
        pipe.incr(key)
        pipe.ttl(key)
        _, count, ttl = pipe.execute()
        return int(count), max(0, int(ttl))


@lru_cache
def _default_cache() -> RedisCache:
    settings = get_settings()
    return RedisCache.from_url(
        settings.REDIS_URL, socket_timeout=settings.REDIS_SOCKET_TIMEOUT
    )


def get_cache() -> RedisCache:
    """FastAPI dependency returning the shared cache (overridable in tests)."""
    return _default_cache()
