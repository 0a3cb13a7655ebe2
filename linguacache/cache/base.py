"""
Translation cache contract.

Implementations can use in-memory, disk, or remote storage. Every
operation must be safe to call from many concurrent tasks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from linguacache.core.models import CacheKey


class TranslationCache(ABC):
    """Key -> translated text store."""

    @abstractmethod
    async def get(self, key: CacheKey) -> str | None:
        """Get a cached translation, or None on a miss."""
        pass

    @abstractmethod
    async def put(self, key: CacheKey, value: str) -> None:
        """Store a translation, silently overwriting an existing one."""
        pass

    @abstractmethod
    async def remove(self, key: CacheKey) -> None:
        """Remove one entry. No-op if absent."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Empty the whole cache."""
        pass

    @abstractmethod
    async def size(self) -> int:
        """Number of cached entries."""
        pass
