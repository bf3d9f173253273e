"""
Response caching for computed scores

Results are keyed by a fingerprint over the normalised answers and the active
configuration version. Activating a new version changes every fingerprint, so
older entries simply stop being read; ``evict_stale`` reclaims their space.
"""

import hashlib
import json
import threading
from typing import Any, Dict, Iterator, Optional, Protocol

import redis

from core.config import Settings, get_settings
from core.logging import get_logger
from core.metrics import metrics
from d1_assessment.schemas import AnswersInput, parse_answers

from .types import ScoreResult

logger = get_logger(__name__, domain="d2_scoring")


def fingerprint(answers: AnswersInput, config_version: int) -> str:
    """
    Build a cache key for an answer set under one configuration version

    Args:
        answers: Complete answers, as a model or a mapping in any key order
        config_version: Version of the configuration the result is computed with

    Returns:
        ``v{version}:{sha256}`` string
    """
    canonical = parse_answers(answers).canonical()
    payload = json.dumps(canonical, sort_keys=True, separators=(",", ":"))
    digest = hashlib.sha256(payload.encode()).hexdigest()
    return f"v{config_version}:{digest}"


def version_of(key: str) -> Optional[int]:
    """Configuration version encoded in a fingerprint, or None for foreign keys"""
    prefix, _, _ = key.partition(":")
    if not prefix.startswith("v"):
        return None
    try:
        return int(prefix[1:])
    except ValueError:
        return None


class CacheBackend(Protocol):
    name: str

    def get(self, key: str) -> Optional[Dict[str, Any]]: ...

    def set(self, key: str, value: Dict[str, Any]) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> Iterator[str]: ...

    def clear(self) -> int: ...


class InMemoryCacheBackend:
    """Process-local dictionary backend"""

    name = "memory"

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        with self._lock:
            snapshot = list(self._data)
        return iter(snapshot)

    def clear(self) -> int:
        with self._lock:
            count = len(self._data)
            self._data.clear()
        return count


class RedisCacheBackend:
    """Redis backend storing JSON payloads with an expiry"""

    name = "redis"

    def __init__(self, client: redis.Redis, ttl: int, prefix: str = "readiness_score"):
        self.client = client
        self.ttl = ttl
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, ttl: int, prefix: str = "readiness_score") -> "RedisCacheBackend":
        return cls(redis.Redis.from_url(url, decode_responses=True), ttl=ttl, prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self.prefix}:score:{key}"

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self.client.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Dict[str, Any]) -> None:
        self.client.setex(self._key(key), self.ttl, json.dumps(value, separators=(",", ":")))

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))

    def keys(self) -> Iterator[str]:
        strip = len(self._key(""))
        for full_key in self.client.scan_iter(match=self._key("*")):
            yield full_key[strip:]

    def clear(self) -> int:
        full_keys = list(self.client.scan_iter(match=self._key("*")))
        if not full_keys:
            return 0
        return int(self.client.delete(*full_keys))


class ResponseCache:
    """Fingerprint-keyed cache of ``ScoreResult`` objects"""

    def __init__(self, backend: Optional[CacheBackend] = None):
        self.backend: CacheBackend = backend or InMemoryCacheBackend()
        self._hits = 0
        self._misses = 0

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    def _miss(self) -> None:
        self._misses += 1
        metrics.track_cache_miss(self.backend.name)

    def get(self, key: str) -> Optional[ScoreResult]:
        """Cached result for a fingerprint, or None. Backend errors count as misses."""
        try:
            payload = self.backend.get(key)
        except Exception as e:
            logger.error(f"Cache get error: {e}")
            self._miss()
            return None

        if payload is None:
            logger.debug(f"Cache miss for key: {key[:24]}...")
            self._miss()
            return None

        try:
            result = ScoreResult.from_dict(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable cache entry {key[:24]}...: {e}")
            self.invalidate(key)
            self._miss()
            return None

        self._hits += 1
        metrics.track_cache_hit(self.backend.name)
        logger.debug(f"Cache hit for key: {key[:24]}...")
        return result

    def put(self, key: str, result: ScoreResult) -> None:
        try:
            self.backend.set(key, result.to_dict())
        except Exception as e:
            logger.error(f"Cache set error: {e}")

    def invalidate(self, key: str) -> None:
        try:
            self.backend.delete(key)
        except Exception as e:
            logger.error(f"Cache delete error: {e}")

    def evict_stale(self, active_version: int) -> int:
        """
        Remove entries computed under any version other than ``active_version``

        Returns:
            Number of entries removed
        """
        try:
            stale = [key for key in self.backend.keys() if version_of(key) != active_version]
            for key in stale:
                self.backend.delete(key)
        except Exception as e:
            logger.error(f"Cache eviction error: {e}")
            return 0

        if stale:
            logger.info(f"Evicted {len(stale)} cache entries not computed with version {active_version}")
        return len(stale)

    def clear(self) -> int:
        try:
            return self.backend.clear()
        except Exception as e:
            logger.error(f"Cache clear error: {e}")
            return 0

    def get_cache_stats(self) -> Dict[str, Any]:
        total = self._hits + self._misses
        return {
            "backend": self.backend.name,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 3) if total else 0.0,
        }


def build_response_cache(settings: Optional[Settings] = None) -> ResponseCache:
    """Create the response cache selected by ``settings.cache_backend``"""
    settings = settings or get_settings()
    if settings.cache_backend == "redis":
        backend: CacheBackend = RedisCacheBackend.from_url(
            settings.redis_url, ttl=settings.cache_ttl, prefix=settings.cache_key_prefix
        )
    else:
        backend = InMemoryCacheBackend()
    logger.info(f"Response cache using {backend.name} backend")
    return ResponseCache(backend)
