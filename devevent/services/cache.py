"""Redis cache for the serialized events list.

The database stays the source of truth: any Redis failure is logged and
treated as a cache miss.
"""

import json
import logging
from typing import Optional

import redis

from devevent.core.config import get_redis_url, settings

logger = logging.getLogger(__name__)

EVENTS_CACHE_KEY = "events:list"


def get_redis_client():
    """Get Redis client for the events cache."""
    return redis.from_url(get_redis_url(), decode_responses=True)


def get_cached_events() -> Optional[list[dict]]:
    try:
        raw = get_redis_client().get(EVENTS_CACHE_KEY)
    except redis.exceptions.RedisError as e:
        logger.warning(f"Events cache read failed: {e}")
        return None

    if raw is None:
        return None
    return json.loads(raw)


def cache_events(events: list[dict]) -> None:
    try:
        get_redis_client().set(
            EVENTS_CACHE_KEY, json.dumps(events), ex=settings.events_cache_ttl
        )
    except redis.exceptions.RedisError as e:
        logger.warning(f"Events cache write failed: {e}")


def invalidate_events() -> None:
    try:
        get_redis_client().delete(EVENTS_CACHE_KEY)
    except redis.exceptions.RedisError as e:
        # A stale list survives at most events_cache_ttl seconds
        logger.warning(f"Events cache invalidation failed: {e}")
