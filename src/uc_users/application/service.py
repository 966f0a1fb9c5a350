"""UserApplicationService — cache-aside coordinator for user point lookups.

Read path:  cache → (miss) store → best-effort cache populate.
Write path: store mutation first; on success update/delete invalidate the
            key unconditionally. Insert never touches the cache.

The store is authoritative. Cache failures never fail a request: a failed
GET is treated as a miss, a failed populate or invalidation is logged and
dropped. An invalidation that fails leaves a stale entry for at most one TTL.

Stateless beyond the gateways and the TTL captured at construction; safe to
share one instance across concurrent requests.
"""

import logging

from src.uc_common.errors import CacheUnavailableError, UserNotFoundError, ValidationError
from src.uc_users.application.schemas import deserialize_user, serialize_user
from src.uc_users.domain.cache import USER_CACHE_TTL_SECONDS, user_cache_key
from src.uc_users.domain.models import User
from src.uc_users.domain.repository import CacheProtocol, UserRepositoryProtocol

logger = logging.getLogger(__name__)


class UserApplicationService:
    def __init__(
        self,
        repo: UserRepositoryProtocol,
        cache: CacheProtocol,
        ttl_seconds: int = USER_CACHE_TTL_SECONDS,
    ) -> None:
        self._repo = repo
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    async def list_users(self) -> list[User]:
        return await self._repo.list_all()

    async def get_user(self, user_id: int) -> User:
        key = user_cache_key(user_id)

        cached = await self._cache_get(key)
        if cached is not None:
            try:
                return deserialize_user(cached)
            except ValueError:
                logger.warning("Discarding undecodable cache entry: key=%s", key)

        user = await self._repo.get_by_id(user_id)
        if user is None:
            # Negative results are not cached; a later insert must be visible.
            raise UserNotFoundError(user_id)

        try:
            await self._cache.set(key, serialize_user(user), self._ttl_seconds)
        except CacheUnavailableError as exc:
            logger.warning("Cache populate failed: key=%s err=%s", key, exc.message)
        return user

    async def create_user(self, name: str | None, email: str | None) -> User:
        if not name or not email:
            raise ValidationError("Name and email are required")
        return await self._repo.insert(name, email)

    async def update_user(
        self,
        user_id: int,
        name: str | None = None,
        email: str | None = None,
    ) -> User:
        if not name and not email:
            raise ValidationError("Name or email is required")
        if name is not None and not name:
            raise ValidationError("Name must not be empty")
        if email is not None and not email:
            raise ValidationError("Email must not be empty")

        user = await self._repo.update(user_id, name=name, email=email)
        if user is None:
            raise UserNotFoundError(user_id)
        await self._invalidate(user_id)
        return user

    async def delete_user(self, user_id: int) -> User:
        user = await self._repo.delete(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        await self._invalidate(user_id)
        return user

    async def _cache_get(self, key: str) -> str | None:
        try:
            return await self._cache.get(key)
        except CacheUnavailableError as exc:
            logger.warning("Cache read failed, falling back to store: key=%s err=%s", key, exc.message)
            return None

    async def _invalidate(self, user_id: int) -> None:
        """Issued only after the store mutation has committed."""
        key = user_cache_key(user_id)
        try:
            await self._cache.delete(key)
        except CacheUnavailableError as exc:
            logger.warning(
                "Cache invalidation failed, entry may be stale until TTL: key=%s err=%s",
                key,
                exc.message,
            )
