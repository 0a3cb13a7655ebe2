"""
Persistent key-value substrate.

The disk-backed cache tier only needs string keys mapped to string
values. Anything that can read all entries, write, remove and clear
fits here: a JSON file, SQLite, Redis, a platform preferences store.
Durability is best effort across restarts, not transactional.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """
    String-keyed string storage.

    Local Implementation: in-memory dict or a JSON file
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get a value, or None if absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Write a value, overwriting any existing one."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a key. Returns False if it was not there."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove every key."""
        pass

    @abstractmethod
    async def items(self) -> dict[str, str]:
        """Read all entries."""
        pass

    async def count(self) -> int:
        """Number of stored keys."""
        return len(await self.items())
