"""
Core models, errors and observable state.
"""

from linguacache.core.errors import (
    TranslationError,
    UnsupportedLanguageError,
    ModelNotAvailableError,
    TransientTranslationError,
    ModelDownloadError,
)
from linguacache.core.models import (
    TranslationContext,
    CacheKey,
    CacheEntry,
    CachePolicy,
    PrepareResult,
    Ready,
    Downloading,
    Failed,
    READY,
    DownloadPhase,
    DownloadState,
    hash_text,
    is_terminal,
)
from linguacache.core.state import StateStream

__all__ = [
    # Errors
    "TranslationError",
    "UnsupportedLanguageError",
    "ModelNotAvailableError",
    "TransientTranslationError",
    "ModelDownloadError",
    # Models
    "TranslationContext",
    "CacheKey",
    "CacheEntry",
    "CachePolicy",
    "PrepareResult",
    "Ready",
    "Downloading",
    "Failed",
    "READY",
    "DownloadPhase",
    "DownloadState",
    "hash_text",
    "is_terminal",
    # State
    "StateStream",
]
