"""
Persistent-backed translation cache.

A KeyValueStore holds every entry (source of truth); an LRU memory tier
in front of it serves hot reads. Values in the store are JSON-encoded
CacheEntry payloads so TTL survives restarts.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Callable

from linguacache.cache.base import TranslationCache
from linguacache.core.models import CacheEntry, CacheKey
from linguacache.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class PersistentTranslationCache(TranslationCache):
    """
    Two-tier cache: memory LRU over a persistent key-value store.

    - get: memory first; on a miss, read the store and promote the hit
      into memory. A failing store read is logged and treated as a miss.
    - put: writes the store, then memory.
    - size: counts the store. memory_size() reports the memory tier.

    Both tiers sit behind one lock so they cannot diverge under
    concurrent put + get.
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_memory_entries: int = 500,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if max_memory_entries < 0:
            raise ValueError("max_memory_entries must be >= 0")
        self.store = store
        self.max_memory_entries = max_memory_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._memory: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, key: CacheKey) -> str | None:
        storage_key = key.storage_key
        async with self._lock:
            now = self._clock()

            # Memory tier
            entry = self._memory.get(storage_key)
            if entry is not None:
                if entry.is_expired(self.ttl_seconds, now):
                    await self._drop_expired(storage_key)
                    return None
                self._memory.move_to_end(storage_key)
                entry.touch(now)
                return entry.value

            # Persistent tier
            entry = await self._read_store(storage_key)
            if entry is None:
                return None
            if entry.is_expired(self.ttl_seconds, now):
                await self._drop_expired(storage_key)
                return None

            entry.touch(now)
            self._add_to_memory(storage_key, entry)
            return entry.value

    async def put(self, key: CacheKey, value: str) -> None:
        storage_key = key.storage_key
        async with self._lock:
            now = self._clock()
            entry = CacheEntry(value, created_at=now, accessed_at=now)
            await self.store.set(storage_key, entry.to_json())
            self._add_to_memory(storage_key, entry)

    async def remove(self, key: CacheKey) -> None:
        storage_key = key.storage_key
        async with self._lock:
            self._memory.pop(storage_key, None)
            await self.store.delete(storage_key)

    async def clear(self) -> None:
        async with self._lock:
            self._memory.clear()
            await self.store.clear()

    async def size(self) -> int:
        async with self._lock:
            return await self.store.count()

    async def memory_size(self) -> int:
        """Number of entries currently held in the memory tier."""
        async with self._lock:
            return len(self._memory)

    # =========================================================================
    # Internals (caller holds the lock)
    # =========================================================================

    async def _read_store(self, storage_key: str) -> CacheEntry | None:
        try:
            payload = await self.store.get(storage_key)
        except Exception as e:
            logger.warning(f"Persistent cache read failed for {storage_key}, treating as miss: {e}")
            return None

        if payload is None:
            return None

        try:
            return CacheEntry.from_json(payload)
        except ValueError as e:
            logger.warning(f"Discarding unreadable cache entry {storage_key}: {e}")
            return None

    async def _drop_expired(self, storage_key: str) -> None:
        self._memory.pop(storage_key, None)
        await self.store.delete(storage_key)
        logger.debug(f"Expired cache entry {storage_key}")

    def _add_to_memory(self, storage_key: str, entry: CacheEntry) -> None:
        self._memory[storage_key] = entry
        self._memory.move_to_end(storage_key)
        while len(self._memory) > self.max_memory_entries:
            self._memory.popitem(last=False)
