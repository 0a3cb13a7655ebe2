"""
Bounded in-memory LRU cache.

Eviction is by access order: a get promotes the entry to most recently
used, and a put that pushes the cache over capacity evicts from the
least recently used end until it fits again.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Callable

from linguacache.cache.base import TranslationCache
from linguacache.core.models import CacheEntry, CacheKey

logger = logging.getLogger(__name__)


class LruTranslationCache(TranslationCache):
    """
    In-memory LRU cache for translations.

    One asyncio.Lock guards the map; every method holds it for its whole
    read-promote or write-evict sequence, so a get racing a put can never
    observe or leave the map over capacity.

    Usage:
        cache = LruTranslationCache(max_entries=500, ttl_seconds=3600)
        await cache.put(key, "Hola")
        await cache.get(key)  # -> "Hola"
    """

    def __init__(
        self,
        max_entries: int = 1000,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, key: CacheKey) -> str | None:
        storage_key = key.storage_key
        async with self._lock:
            entry = self._entries.get(storage_key)
            if entry is None:
                return None

            now = self._clock()
            if entry.is_expired(self.ttl_seconds, now):
                del self._entries[storage_key]
                logger.debug(f"Expired cache entry {storage_key}")
                return None

            self._entries.move_to_end(storage_key)
            entry.touch(now)
            return entry.value

    async def put(self, key: CacheKey, value: str) -> None:
        storage_key = key.storage_key
        async with self._lock:
            now = self._clock()
            self._entries[storage_key] = CacheEntry(value, created_at=now, accessed_at=now)
            self._entries.move_to_end(storage_key)
            self._evict_over_capacity()

    async def remove(self, key: CacheKey) -> None:
        async with self._lock:
            self._entries.pop(key.storage_key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    async def size(self) -> int:
        async with self._lock:
            return len(self._entries)

    def _evict_over_capacity(self) -> None:
        # Caller holds the lock.
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cache entry {evicted}")
