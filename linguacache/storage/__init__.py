"""
Storage abstractions for the persistent cache tier.

Any string-keyed string store works; local implementations are provided.
"""

from linguacache.storage.base import KeyValueStore
from linguacache.storage.local import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    create_local_store,
)

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "create_local_store",
]
