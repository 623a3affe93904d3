"""
Cache layer tests — key derivation, miss vs. outage signalling and the
read-through helper used by the list endpoints.

Redis is replaced by an ``AsyncMock`` so every branch can be driven without
a server.
"""
import json
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from starlette.requests import Request

from social_network.cache import CacheManager, cache_key
from social_network.config import settings
from social_network.errors import CacheNotFoundError, CacheUnavailableError


def _request(path: str = "/accounts/comments", query: bytes = b"", method: str = "GET") -> Request:
    return Request({
        "type": "http",
        "method": method,
        "scheme": "http",
        "server": ("test", 80),
        "root_path": "",
        "path": path,
        "query_string": query,
        "headers": [],
    })


def _manager(redis_client=None) -> CacheManager:
    manager = CacheManager()
    manager._redis = redis_client
    return manager


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def test_cache_key_ignores_query_parameter_order():
    a = cache_key(_request(query=b"page=1&post_id=p1"))
    b = cache_key(_request(query=b"post_id=p1&page=1"))
    assert a == b


def test_cache_key_distinguishes_method_path_and_query():
    base = cache_key(_request(query=b"page=1"))
    assert base != cache_key(_request(query=b"page=2"))
    assert base != cache_key(_request(path="/accounts/posts", query=b"page=1"))
    assert base != cache_key(_request(query=b"page=1", method="HEAD"))


def test_cache_key_scope_separates_requesters():
    request = _request(query=b"page=1")
    assert cache_key(request, "alice") != cache_key(request, "bob")
    assert cache_key(request, "alice") == cache_key(request, "alice")


# ---------------------------------------------------------------------------
# find / insert
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_find_hit_returns_decoded_payload():
    redis_client = AsyncMock()
    redis_client.get.return_value = json.dumps({"items": [1, 2]})
    manager = _manager(redis_client)

    assert await manager.find(_request()) == {"items": [1, 2]}
    assert manager.stats["hits"] == 1


@pytest.mark.asyncio
async def test_find_miss_raises_not_found():
    redis_client = AsyncMock()
    redis_client.get.return_value = None
    manager = _manager(redis_client)

    with pytest.raises(CacheNotFoundError):
        await manager.find(_request())
    assert manager.stats["misses"] == 1


@pytest.mark.asyncio
async def test_find_connection_failure_raises_unavailable():
    redis_client = AsyncMock()
    redis_client.get.side_effect = RedisConnectionError("refused")

    with pytest.raises(CacheUnavailableError):
        await _manager(redis_client).find(_request())


@pytest.mark.asyncio
async def test_find_without_connection_raises_unavailable():
    with pytest.raises(CacheUnavailableError):
        await _manager(None).find(_request())


@pytest.mark.asyncio
async def test_insert_sets_key_with_ttl():
    redis_client = AsyncMock()
    request = _request(query=b"page=1")

    await _manager(redis_client).insert(request, {"items": []})

    redis_client.set.assert_awaited_once_with(
        cache_key(request), json.dumps({"items": []}), ex=settings.CACHE_TTL_LIST
    )


# ---------------------------------------------------------------------------
# read_through
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_read_through_hit_skips_loader():
    redis_client = AsyncMock()
    redis_client.get.return_value = json.dumps({"cached": True})
    loader = AsyncMock(return_value={"cached": False})

    result = await _manager(redis_client).read_through(_request(), loader)

    assert result == {"cached": True}
    loader.assert_not_awaited()


@pytest.mark.asyncio
async def test_read_through_miss_loads_and_stores():
    redis_client = AsyncMock()
    redis_client.get.return_value = None
    loader = AsyncMock(return_value={"fresh": True})

    result = await _manager(redis_client).read_through(_request(), loader)

    assert result == {"fresh": True}
    loader.assert_awaited_once()
    redis_client.set.assert_awaited_once()


@pytest.mark.asyncio
async def test_read_through_outage_falls_back_to_loader():
    redis_client = AsyncMock()
    redis_client.get.side_effect = RedisConnectionError("down")
    redis_client.set.side_effect = RedisConnectionError("down")
    loader = AsyncMock(return_value={"fresh": True})

    assert await _manager(redis_client).read_through(_request(), loader) == {"fresh": True}


@pytest.mark.asyncio
async def test_read_through_loader_error_is_not_cached():
    redis_client = AsyncMock()
    redis_client.get.return_value = None
    loader = AsyncMock(side_effect=RuntimeError("boom"))

    with pytest.raises(RuntimeError):
        await _manager(redis_client).read_through(_request(), loader)
    redis_client.set.assert_not_awaited()
