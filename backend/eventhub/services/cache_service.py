"""
Redis caching service for public event listings.

CACHING STRATEGY
================

What we cache:
  - Upcoming-event search results, keyed by the normalized filter:
    "events:list:upcoming:search={text}&category={id}"
  - The featured list: "events:list:featured:limit={n}"

Why:
  - Listing and home-page reads dominate traffic
  - The data only changes on bookings, cancellations and admin edits

Invalidation strategy:
  - Any booking, cancellation, event creation or deletion deletes every
    "events:list:*" key (SCAN + DELETE)
  - TTL-based expiry as safety net

Why NOT cache event detail or anything the booking flow reads:
  - Admission is decided by the inventory store only. A stale cached seat
    count is acceptable on a listing page, never in the reservation path.

Redis errors are logged and treated as a cache miss.
"""

import json
from typing import Optional
from urllib.parse import quote

import redis.asyncio as redis

from eventhub.core.config import get_settings
from eventhub.core.logging import get_logger
from eventhub.core.metrics import record_cache_operation
from eventhub.infrastructure.redis_client import get_redis

logger = get_logger(__name__)
settings = get_settings()

LIST_PREFIX = "events:list:"


def make_upcoming_key(search_text: Optional[str], category_id: Optional[str]) -> str:
    search = (search_text or "").strip().casefold()
    return f"{LIST_PREFIX}upcoming:search={quote(search)}&category={category_id or ''}"


def make_featured_key(limit: int) -> str:
    return f"{LIST_PREFIX}featured:limit={limit}"


async def get_cached(key: str) -> Optional[list]:
    """Retrieve a cached listing payload."""
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(key)
    except redis.RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    if data:
        logger.debug("cache_hit", key=key)
        return json.loads(data)
    logger.debug("cache_miss", key=key)
    return None


async def set_cached(key: str, data: list) -> None:
    """Cache a JSON-serializable listing payload with TTL."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except redis.RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_event_cache() -> None:
    """
    Invalidate all cached event listings.
    Uses SCAN to find and delete all keys matching the prefix.
    """
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except redis.RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except redis.RedisError as e:
        return {"status": "error", "error": str(e)}
