"""
Translation caches.

- LruTranslationCache: bounded memory, access-order eviction
- PersistentTranslationCache: memory LRU in front of a KeyValueStore
"""

from __future__ import annotations

import logging

from linguacache.cache.base import TranslationCache
from linguacache.cache.memory import LruTranslationCache
from linguacache.cache.persistent import PersistentTranslationCache
from linguacache.core.models import CachePolicy
from linguacache.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


def create_cache(
    policy: CachePolicy | None = None,
    store: KeyValueStore | None = None,
) -> TranslationCache:
    """
    Build the cache a policy asks for.

    Persistence needs a store; without one the cache stays memory-only
    and bounded by max_memory_entries. A policy with no memory and no
    persistence gives a cache that never keeps anything.
    """
    policy = policy or CachePolicy.default()

    if policy.persist and store is not None:
        return PersistentTranslationCache(
            store=store,
            max_memory_entries=policy.max_memory_entries,
            ttl_seconds=policy.ttl_seconds,
        )

    if policy.persist:
        logger.debug("No persistent store given, caching in memory only")

    return LruTranslationCache(
        max_entries=policy.max_memory_entries,
        ttl_seconds=policy.ttl_seconds,
    )


__all__ = [
    "TranslationCache",
    "LruTranslationCache",
    "PersistentTranslationCache",
    "create_cache",
]
