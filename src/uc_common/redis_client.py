"""Redis cache gateway — plain get / set-with-expiry / delete on string keys.

Callers never mutate a cached value in place; they overwrite a whole
payload or delete the key, so no read-modify-write atomicity is needed.
All driver failures surface as CacheUnavailableError; deciding whether a
cache failure matters is the caller's job.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.uc_common.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


class RedisCache:
    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        client = aioredis.from_url(
            url,
            decode_responses=True,
        )
        return cls(client)

    @property
    def client(self) -> aioredis.Redis:
        return self._client

    async def ping(self) -> None:
        try:
            await self._client.ping()
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"Redis ping failed: {exc}") from exc
        logger.info("Redis connected successfully")

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"GET {key} failed: {exc}") from exc

    async def set(self, key: str, payload: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, payload, ex=ttl_seconds)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"SET {key} failed: {exc}") from exc

    async def delete(self, key: str) -> None:
        """Remove key; deleting an absent key is a no-op."""
        try:
            await self._client.delete(key)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"DEL {key} failed: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()
