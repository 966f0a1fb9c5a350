"""User cache conventions.

  - Cache key: f"user:{user_id}" (decimal id)
  - TTL: 3600s for every populated entry
  - Payload: the User JSON document as text
  - Read: cache-aside (check cache → DB on miss → populate cache)
  - Write: DB first, then cache invalidate (update / delete only)

Only point lookups are cached; the user list is never cached.
"""

USER_CACHE_PREFIX = "user:"
USER_CACHE_TTL_SECONDS = 3600


def user_cache_key(user_id: int) -> str:
    return f"{USER_CACHE_PREFIX}{user_id}"
