import json
import logging
from typing import Any, Awaitable, Callable
from urllib.parse import urlencode

import redis.asyncio as redis
from redis.exceptions import RedisError
from starlette.requests import Request

from social_network.config import settings
from social_network.errors import CacheNotFoundError, CacheUnavailableError

logger = logging.getLogger(__name__)


def cache_key(request: Request, scope: str | None = None) -> str:
    """
    Derive the cache key for *request*.

    The key is built from the HTTP method, the path and the query parameters
    sorted by name, so ``?page=1&post_id=x`` and ``?post_id=x&page=1`` share
    an entry.  *scope* is appended for responses that depend on who asked.
    """
    query = urlencode(sorted(request.query_params.multi_items()))
    key = f"cache:{request.method}:{request.url.path}?{query}"
    if scope:
        key = f"{key}#{scope}"
    return key


class CacheManager:
    """
    Read-through cache for list endpoints, backed by Redis.

    A miss raises ``CacheNotFoundError``; a missing connection or a Redis
    failure raises ``CacheUnavailableError``.  ``read_through`` recovers from
    both by falling back to the loader, logging outages at WARNING.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits: int = 0
        self._misses: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection pool.  Called once at application startup."""
        self._redis = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", settings.REDIS_URL)
        except (RedisError, OSError) as exc:
            logger.warning("Redis ping failed: %s", exc)

    async def disconnect(self) -> None:
        """Close the connection pool.  Called once at application shutdown."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Core cache operations
    # ------------------------------------------------------------------

    async def find(self, request: Request, scope: str | None = None) -> Any:
        """Return the cached payload for *request*."""
        key = cache_key(request, scope)
        if not self._redis:
            self._misses += 1
            raise CacheUnavailableError("not connected")
        try:
            data = await self._redis.get(key)
        except (RedisError, OSError) as exc:
            self._misses += 1
            raise CacheUnavailableError(str(exc)) from exc

        if data is None:
            self._misses += 1
            raise CacheNotFoundError(key)
        self._hits += 1
        return json.loads(data)

    async def insert(self, request: Request, payload: Any, scope: str | None = None) -> None:
        """Store *payload* under the key of *request* for ``CACHE_TTL_LIST`` seconds."""
        key = cache_key(request, scope)
        if not self._redis:
            raise CacheUnavailableError("not connected")
        try:
            await self._redis.set(
                key, json.dumps(payload, default=str), ex=settings.CACHE_TTL_LIST
            )
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(str(exc)) from exc

    async def read_through(
        self,
        request: Request,
        load: Callable[[], Awaitable[Any]],
        scope: str | None = None,
    ) -> Any:
        """
        Serve *request* from the cache, or call *load* and cache its result.

        Errors raised by *load* propagate untouched and nothing is cached.
        """
        try:
            return await self.find(request, scope)
        except CacheNotFoundError as exc:
            logger.debug("%s", exc)
        except CacheUnavailableError as exc:
            logger.warning("Bypassing cache for %s: %s", request.url.path, exc.reason)

        payload = await load()
        try:
            await self.insert(request, payload, scope)
        except CacheUnavailableError as exc:
            logger.warning("Could not cache %s: %s", request.url.path, exc.reason)
        return payload

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    @property
    def stats(self) -> dict:
        """Return a snapshot of hit/miss counters for the health endpoint."""
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


# Module-level singleton shared across all request handlers.
cache = CacheManager()
