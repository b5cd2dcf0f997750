"""
Test the Redis-backed events list cache.
"""
import json

import pytest
import redis

from devevent.core.config import settings
from devevent.services import cache
from devevent.services.cache import (
    EVENTS_CACHE_KEY,
    cache_events,
    get_cached_events,
    invalidate_events,
)


class BrokenRedis:
    """Client whose every call fails like an unreachable server."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise redis.exceptions.ConnectionError("connection refused")

        return fail


class TestEventsCache:
    """Test events cache functionality."""

    def test_cache_miss_returns_none(self, fake_redis):
        assert get_cached_events() is None

    def test_cache_round_trip(self, fake_redis):
        events = [{"id": 1, "title": "PyCon"}]

        cache_events(events)

        assert get_cached_events() == events
        assert json.loads(fake_redis.get(EVENTS_CACHE_KEY)) == events

    def test_cache_entry_expires(self, fake_redis):
        cache_events([])

        ttl = fake_redis.ttl(EVENTS_CACHE_KEY)
        assert 0 < ttl <= settings.events_cache_ttl

    def test_invalidate_removes_entry(self, fake_redis):
        cache_events([{"id": 1}])

        invalidate_events()

        assert fake_redis.get(EVENTS_CACHE_KEY) is None
        assert get_cached_events() is None

    def test_redis_errors_are_a_cache_miss(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(cache, "get_redis_client", lambda: BrokenRedis())

        assert get_cached_events() is None
        cache_events([{"id": 1}])
        invalidate_events()
