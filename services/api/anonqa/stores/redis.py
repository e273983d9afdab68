"""Redis-backed cache for question listings.

Listing responses are cached per (category, sort, search) under a
generation number. Every mutation bumps the generation, so a write is
visible on the next read; superseded entries simply age out by TTL
(settings.listing_cache_ttl_seconds, 0 disables caching).

All helpers raise RuntimeError while Redis is not initialized; callers treat
that as "no cache" and go straight to the store.
"""

import hashlib
import json
import logging
from typing import Any

import redis.asyncio as redis

from anonqa.settings import get_settings

PREFIX_LISTING = "listing:"
KEY_LISTING_GENERATION = "listing:generation"

_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis(url: str | None = None) -> bool:
    """Connect and ping. Returns False when no Redis URL is configured."""
    global _redis
    url = url if url is not None else get_settings().redis_url
    if not url:
        logger.info("Redis disabled (REDIS_URL empty); listing cache off")
        return False

    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise
    _redis = client
    logger.info("Redis connected")
    return True


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
    _redis = None


def _get_redis() -> redis.Redis:
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


async def cache_get_json(key: str) -> Any | None:
    """Cached JSON value, or None on miss."""
    value = await _get_redis().get(key)
    return json.loads(value) if value else None


async def cache_set_json(key: str, value: Any, ttl: int) -> None:
    await _get_redis().setex(key, ttl, json.dumps(value))


async def get_listing_generation() -> int:
    """Current listing generation; read once per request and reused for get and set."""
    value = await _get_redis().get(KEY_LISTING_GENERATION)
    return int(value) if value else 0


def build_listing_key(generation: int, category: str | None, sort: str, search: str | None) -> str:
    """Cache key for one listing query at one generation."""
    raw = json.dumps([(category or "").strip().lower(), sort, (search or "").strip().lower()])
    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()[:24]
    return f"{PREFIX_LISTING}{generation}:{digest}"


async def get_listing_cache(
    generation: int,
    category: str | None,
    sort: str,
    search: str | None,
) -> list[dict[str, Any]] | None:
    return await cache_get_json(build_listing_key(generation, category, sort, search))


async def set_listing_cache(
    generation: int,
    category: str | None,
    sort: str,
    search: str | None,
    payload: list[dict[str, Any]],
) -> None:
    """Cache a payload under the generation it was read at.

    A write that lands while the payload is being built bumps the generation,
    so the payload is filed under a key that is never read again.
    """
    ttl = get_settings().listing_cache_ttl_seconds
    if ttl <= 0:
        return
    await cache_set_json(build_listing_key(generation, category, sort, search), payload, ttl)


async def invalidate_listing_cache() -> None:
    """Bump the listing generation so earlier entries are never read again."""
    await _get_redis().incr(KEY_LISTING_GENERATION)
