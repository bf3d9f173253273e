"""
Test fingerprinting and the response cache backends
"""
from unittest.mock import Mock

import fakeredis
import pytest

from d2_scoring.cache import (
    InMemoryCacheBackend,
    RedisCacheBackend,
    ResponseCache,
    build_response_cache,
    fingerprint,
    version_of,
)
from d2_scoring.engine import ReadinessScoringEngine, StaticConfigurationProvider
from d3_versioning.defaults import default_configuration


@pytest.fixture
def result(strong_answers):
    engine = ReadinessScoringEngine(StaticConfigurationProvider(default_configuration()))
    return engine.compute_score(strong_answers)


class TestFingerprint:
    def test_key_order_does_not_matter(self, strong_answers):
        reordered = dict(sorted(strong_answers.items(), reverse=True))
        assert fingerprint(strong_answers, 1) == fingerprint(reordered, 1)

    def test_camel_and_snake_case_match(self, minimal_answers):
        camel = {
            "prototype": False,
            "milestones": "concept",
            "revenue": False,
            "mrr": "none",
            "capTable": False,
            "externalCapital": False,
            "fullTimeTeam": False,
            "employees": "1-2",
            "termSheets": False,
            "investors": "none",
        }
        assert fingerprint(camel, 2) == fingerprint(minimal_answers, 2)

    def test_version_changes_key(self, minimal_answers):
        assert fingerprint(minimal_answers, 1) != fingerprint(minimal_answers, 2)

    def test_answer_change_changes_key(self, minimal_answers):
        assert fingerprint(minimal_answers, 1) != fingerprint({**minimal_answers, "prototype": True}, 1)

    def test_version_prefix(self, minimal_answers):
        key = fingerprint(minimal_answers, 7)

        assert key.startswith("v7:")
        assert version_of(key) == 7
        assert version_of("unrelated") is None


class TestResponseCache:
    def test_miss_then_hit(self, result):
        cache = ResponseCache()

        assert cache.get("v0:abc") is None
        cache.put("v0:abc", result)

        assert cache.get("v0:abc") == result
        assert cache.hits == 1
        assert cache.misses == 1

    def test_invalidate(self, result):
        cache = ResponseCache()
        cache.put("v0:abc", result)

        cache.invalidate("v0:abc")

        assert cache.get("v0:abc") is None

    def test_evict_stale_keeps_active_version(self, result):
        cache = ResponseCache()
        cache.put("v1:a", result)
        cache.put("v1:b", result)
        cache.put("v2:a", result)

        assert cache.evict_stale(2) == 2
        assert cache.get("v2:a") is not None
        assert cache.get("v1:a") is None

    def test_clear(self, result):
        cache = ResponseCache()
        cache.put("v1:a", result)

        assert cache.clear() == 1
        assert cache.get("v1:a") is None

    def test_backend_errors_are_misses(self, result):
        backend = Mock()
        backend.name = "broken"
        backend.get.side_effect = ConnectionError("down")
        backend.set.side_effect = ConnectionError("down")
        cache = ResponseCache(backend)

        cache.put("v1:a", result)

        assert cache.get("v1:a") is None
        assert cache.misses == 1

    def test_unreadable_entry_discarded(self):
        backend = InMemoryCacheBackend()
        backend.set("v1:a", {"total_score": 10})
        cache = ResponseCache(backend)

        assert cache.get("v1:a") is None
        assert list(backend.keys()) == []

    def test_stats(self, result):
        cache = ResponseCache()
        cache.put("v0:a", result)
        cache.get("v0:a")
        cache.get("v0:b")

        stats = cache.get_cache_stats()

        assert stats["backend"] == "memory"
        assert stats["hit_rate"] == 0.5


class TestRedisCacheBackend:
    @pytest.fixture
    def backend(self):
        client = fakeredis.FakeRedis(decode_responses=True)
        return RedisCacheBackend(client, ttl=60, prefix="test")

    def test_round_trip_through_redis(self, backend, result):
        cache = ResponseCache(backend)
        cache.put("v3:key", result)

        assert cache.get("v3:key") == result
        assert backend.client.ttl("test:score:v3:key") > 0

    def test_keys_strip_prefix(self, backend, result):
        cache = ResponseCache(backend)
        cache.put("v3:a", result)
        cache.put("v4:b", result)

        assert sorted(backend.keys()) == ["v3:a", "v4:b"]
        assert cache.evict_stale(4) == 1
        assert list(backend.keys()) == ["v4:b"]

    def test_clear_only_touches_own_prefix(self, backend, result):
        backend.client.set("other:key", "1")
        ResponseCache(backend).put("v1:a", result)

        assert backend.clear() == 1
        assert backend.client.get("other:key") == "1"


class TestBuildResponseCache:
    def test_memory_backend_by_default(self):
        settings = Mock(cache_backend="memory")
        assert build_response_cache(settings).backend.name == "memory"

    def test_redis_backend_from_settings(self):
        settings = Mock(cache_backend="redis", redis_url="redis://localhost:6379/0", cache_ttl=60, cache_key_prefix="x")
        cache = build_response_cache(settings)

        assert isinstance(cache.backend, RedisCacheBackend)
        assert cache.backend.ttl == 60
