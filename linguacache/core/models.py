"""
Core data models for the translation cache.

These are the values that flow between the masker, the caches and the
translators. Keys and results are immutable; cache entries carry the
timing metadata needed for LRU eviction and TTL expiry.
"""

from __future__ import annotations

import hashlib
import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from pydantic import BaseModel, Field

from linguacache.core.errors import TranslationError

if TYPE_CHECKING:
    from linguacache.config import Settings


# =============================================================================
# Translation Context
# =============================================================================


class TranslationContext(str, Enum):
    """Where a piece of text came from."""

    UI = "ui"                      # Interface labels, usually short, may have placeholders
    BACKEND = "backend"            # API responses, server messages
    USER_CONTENT = "user_content"  # Comments, posts, messages
    SYSTEM = "system"              # Errors, notifications


# =============================================================================
# Cache Key
# =============================================================================


HASH_WIDTH = 16


def hash_text(text: str) -> str:
    """Fixed-width content hash. Not a security boundary, only a compact identity."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:HASH_WIDTH]


@dataclass(frozen=True)
class CacheKey:
    """
    Identity of one cached translation.

    Never holds the source text itself, only its hash, so keys stay small
    and the persistent tier does not store raw user content in its keys.
    """

    source_lang: str
    target_lang: str
    content_hash: str
    context: TranslationContext

    @classmethod
    def create(
        cls,
        text: str,
        source_lang: str,
        target_lang: str,
        context: TranslationContext = TranslationContext.UI,
    ) -> CacheKey:
        """Build a key from the original (unmasked) text and a language pair."""
        return cls(
            source_lang=source_lang.lower(),
            target_lang=target_lang.lower(),
            content_hash=hash_text(text),
            context=TranslationContext(context),
        )

    @property
    def storage_key(self) -> str:
        """Canonical string form: {source}_{target}_{CONTEXT}_{hash}. Not reversible."""
        return f"{self.source_lang}_{self.target_lang}_{self.context.name}_{self.content_hash}"

    def __str__(self) -> str:
        return self.storage_key


# =============================================================================
# Cache Entry
# =============================================================================


@dataclass
class CacheEntry:
    """A cached translation plus the timestamps eviction and expiry need."""

    value: str
    created_at: float = field(default_factory=time.time)
    accessed_at: float = field(default_factory=time.time)

    def touch(self, now: float | None = None) -> None:
        self.accessed_at = now if now is not None else time.time()

    def is_expired(self, ttl_seconds: float | None, now: float | None = None) -> bool:
        if ttl_seconds is None:
            return False
        now = now if now is not None else time.time()
        return now - self.created_at >= ttl_seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "created_at": self.created_at,
            "accessed_at": self.accessed_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheEntry:
        return cls(
            value=data["value"],
            created_at=float(data.get("created_at", time.time())),
            accessed_at=float(data.get("accessed_at", data.get("created_at", time.time()))),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, payload: str) -> CacheEntry:
        """Decode a stored entry. Raises ValueError on anything malformed."""
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed cache entry: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("value"), str):
            raise ValueError("Malformed cache entry: missing 'value'")
        return cls.from_dict(data)


# =============================================================================
# Cache Policy
# =============================================================================


class CachePolicy(BaseModel):
    """How translations are cached."""

    model_config = {"frozen": True}

    max_memory_entries: int = Field(default=1000, ge=0)
    persist: bool = True
    ttl_seconds: float | None = Field(default=None, gt=0)  # None = never expire
    cache_failures: bool = False

    @property
    def is_disabled(self) -> bool:
        """No memory and no persistence: every lookup misses."""
        return self.max_memory_entries == 0 and not self.persist

    @classmethod
    def default(cls) -> CachePolicy:
        return cls()

    @classmethod
    def memory_only(cls, max_memory_entries: int = 1000) -> CachePolicy:
        return cls(max_memory_entries=max_memory_entries, persist=False)

    @classmethod
    def no_cache(cls) -> CachePolicy:
        return cls(max_memory_entries=0, persist=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> CachePolicy:
        return cls(
            max_memory_entries=settings.cache_max_memory_entries,
            persist=settings.cache_persist,
            ttl_seconds=settings.cache_ttl_seconds,
            cache_failures=settings.cache_failures,
        )


# =============================================================================
# Prepare Result
# =============================================================================


@dataclass(frozen=True)
class Ready:
    """The translator can serve the language pair now."""


@dataclass(frozen=True)
class Downloading:
    """Warm-up is still running. Poll again or watch the download state."""

    progress: float = 0.0

    def __post_init__(self):
        if not 0.0 <= self.progress <= 1.0:
            raise ValueError(f"progress must be within [0, 1], got {self.progress}")


@dataclass(frozen=True)
class Failed:
    """Warm-up failed; `error` carries the underlying cause."""

    error: TranslationError


PrepareResult = Union[Ready, Downloading, Failed]

READY = Ready()


def is_terminal(result: PrepareResult) -> bool:
    return isinstance(result, (Ready, Failed))


# =============================================================================
# Download State
# =============================================================================


class DownloadPhase(str, Enum):
    IDLE = "idle"
    DOWNLOADING = "downloading"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class DownloadState:
    """One step in a model download: Idle -> Downloading -> Complete | Failed."""

    phase: DownloadPhase = DownloadPhase.IDLE
    progress: float = 0.0
    language: str | None = None
    error: BaseException | None = None

    @classmethod
    def idle(cls) -> DownloadState:
        return cls()

    @classmethod
    def downloading(cls, progress: float, language: str) -> DownloadState:
        return cls(DownloadPhase.DOWNLOADING, progress=progress, language=language)

    @classmethod
    def complete(cls, language: str | None = None) -> DownloadState:
        return cls(DownloadPhase.COMPLETE, progress=1.0, language=language)

    @classmethod
    def failed(cls, error: BaseException, language: str | None = None) -> DownloadState:
        return cls(DownloadPhase.FAILED, language=language, error=error)
