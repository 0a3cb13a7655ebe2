"""
Local key-value store implementations.

These are in-memory or filesystem-based implementations
that work without any external services.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from linguacache.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


# =============================================================================
# In-Memory Store
# =============================================================================


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory store for development and tests. Lost on restart."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> bool:
        if key in self._data:
            del self._data[key]
            return True
        return False

    async def clear(self) -> None:
        self._data.clear()

    async def items(self) -> dict[str, str]:
        return dict(self._data)

    async def count(self) -> int:
        return len(self._data)


# =============================================================================
# JSON File Store
# =============================================================================


class JsonFileKeyValueStore(KeyValueStore):
    """
    Whole-map JSON file on local disk.

    The file is read once, kept in memory, and rewritten on every change
    via a temp file + os.replace so a crash never leaves half a file.
    Changes are made on a copy; the in-memory map only moves on once
    the write has landed.
    A file that is not a JSON object of strings is treated as empty and
    replaced on the next write.
    """

    def __init__(self, path: str | Path = "./data/translation_cache.json"):
        self.path = Path(path)
        self._data: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data

        if not self.path.exists():
            self._data = {}
            return self._data

        raw = self.path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable cache file {self.path}: {e}")
            data = {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring cache file {self.path}: expected a JSON object")
            data = {}

        self._data = {str(k): v for k, v in data.items() if isinstance(v, str)}
        return self._data

    def _flush(self, data: dict[str, str]) -> None:
        """Write data to disk, then make it the in-memory map."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        self._data = data

    async def get(self, key: str) -> str | None:
        return self._load().get(key)

    async def set(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        self._flush(data)

    async def delete(self, key: str) -> bool:
        data = dict(self._load())
        if key not in data:
            return False
        del data[key]
        self._flush(data)
        return True

    async def clear(self) -> None:
        self._flush({})

    async def items(self) -> dict[str, str]:
        return dict(self._load())

    async def count(self) -> int:
        return len(self._load())


# =============================================================================
# Factory
# =============================================================================


def create_local_store(path: str | Path | None = None) -> KeyValueStore:
    """File-backed store when a path is given, in-memory otherwise."""
    if path is None:
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(path)
