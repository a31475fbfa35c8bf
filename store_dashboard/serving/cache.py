"""
Sales Cache Module

Bounded, best-effort memo of generated sales keyed by requested range.
Two interchangeable backends:
- in-process LRU (default)
- Redis, for sharing across API workers

Entries may be evicted at any time; callers must treat a miss as normal.
"""

import json
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import asdict
from typing import List, Optional

import structlog
from redis import Redis

from store_dashboard.config.settings import Settings
from store_dashboard.data.models import ItemSalesRecord

logger = structlog.get_logger(__name__)


class SalesCache(ABC):
    """Cache interface: get, put, and evict down to capacity"""

    def __init__(self, max_entries: int = 32):
        self.max_entries = max_entries

    @abstractmethod
    def get(self, key: str) -> Optional[List[ItemSalesRecord]]:
        """Cached records for key, or None on a miss"""

    @abstractmethod
    def put(self, key: str, records: List[ItemSalesRecord]) -> None:
        """Store records and evict anything over capacity"""

    @abstractmethod
    def evict_if_over_capacity(self) -> int:
        """Drop least recently used entries; returns the number dropped"""

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry"""


class InMemorySalesCache(SalesCache):
    """
    Thread-safe LRU cache held in process memory.

    Example:
        cache = InMemorySalesCache(max_entries=16)
        cache.put(date_range.cache_key, records)
        records = cache.get(date_range.cache_key)
    """

    def __init__(self, max_entries: int = 32):
        super().__init__(max_entries)
        self._entries: "OrderedDict[str, List[ItemSalesRecord]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[List[ItemSalesRecord]]:
        with self._lock:
            records = self._entries.get(key)
            if records is not None:
                self._entries.move_to_end(key)
            return records

    def put(self, key: str, records: List[ItemSalesRecord]) -> None:
        with self._lock:
            self._entries[key] = records
            self._entries.move_to_end(key)
        self.evict_if_over_capacity()

    def evict_if_over_capacity(self) -> int:
        evicted = 0
        with self._lock:
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
                evicted += 1
        if evicted:
            logger.debug("Cache entries evicted", evicted=evicted, size=len(self._entries))
        return evicted

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class RedisSalesCache(SalesCache):
    """
    Redis-backed cache with namespace support and TTL.

    Recency is tracked in a sorted set so the namespace can be trimmed
    to ``max_entries`` on every write.
    """

    def __init__(
        self,
        client: Redis,
        namespace: str = "sales",
        max_entries: int = 32,
        ttl: Optional[int] = 300,
    ):
        super().__init__(max_entries)
        self.client = client
        self.namespace = namespace
        self.ttl = ttl

    def _key(self, key: str) -> str:
        """Generate namespaced key"""
        return f"{self.namespace}:{key}"

    @property
    def _index_key(self) -> str:
        return f"{self.namespace}:__index__"

    def get(self, key: str) -> Optional[List[ItemSalesRecord]]:
        value = self.client.get(self._key(key))
        if value is None:
            return None

        try:
            payload = json.loads(value)
        except json.JSONDecodeError as e:
            logger.warning("Discarding unreadable cache entry", key=key, error=str(e))
            self.client.delete(self._key(key))
            return None

        self.client.zadd(self._index_key, {key: time.time()})
        return [ItemSalesRecord(**row) for row in payload]

    def put(self, key: str, records: List[ItemSalesRecord]) -> None:
        serialized = json.dumps([asdict(r) for r in records])
        if self.ttl:
            self.client.setex(self._key(key), self.ttl, serialized)
        else:
            self.client.set(self._key(key), serialized)
        self.client.zadd(self._index_key, {key: time.time()})
        self.evict_if_over_capacity()

    def evict_if_over_capacity(self) -> int:
        overflow = self.client.zcard(self._index_key) - self.max_entries
        if overflow <= 0:
            return 0

        popped = self.client.zpopmin(self._index_key, overflow)
        keys = [self._key(member) for member, _score in popped]
        if keys:
            self.client.delete(*keys)
        logger.debug("Cache entries evicted", evicted=len(keys), namespace=self.namespace)
        return len(keys)

    def clear(self) -> None:
        members = self.client.zrange(self._index_key, 0, -1)
        keys = [self._key(m) for m in members] + [self._index_key]
        self.client.delete(*keys)


def create_cache(settings: Settings) -> Optional[SalesCache]:
    """Build the configured cache backend, or None when caching is disabled"""
    cache_settings = settings.cache
    if not cache_settings.enabled:
        return None

    if cache_settings.backend == "redis":
        client = Redis.from_url(
            settings.redis.get_url(),
            socket_timeout=settings.redis.socket_timeout,
            decode_responses=True,
        )
        logger.info("Using Redis sales cache", namespace=cache_settings.namespace)
        return RedisSalesCache(
            client,
            namespace=cache_settings.namespace,
            max_entries=cache_settings.max_entries,
            ttl=cache_settings.ttl_seconds,
        )

    return InMemorySalesCache(max_entries=cache_settings.max_entries)
