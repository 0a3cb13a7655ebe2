"""
Internationalization - cached translation behind a pluggable backend.

Design:
1. Any backend implements Translator (LLM, on-device models, test stubs)
2. CachingTranslator adds caching and placeholder protection
3. Localizer is the app-facing facade: current language, timeout, fallback
4. Lazy - only translates on request, or ahead of time via warm-up

Usage:
    from linguacache.i18n import Localizer, LocalizerConfig, LLMTranslator

    localizer = Localizer(LocalizerConfig(
        supported_languages=["en", "es", "fr"],
        translator=LLMTranslator(),
    ))
    localizer.set_language("es")

    # Simple
    text_es = await localizer.translate("Hello world")

    # Batch
    texts = await localizer.translate_many(["Hello", "Goodbye"])
"""

from linguacache.i18n.translator import (
    Translator,
    CachingTranslator,
)
from linguacache.i18n.placeholders import (
    PlaceholderMasker,
    MaskResult,
    PLACEHOLDER_PATTERNS,
)
from linguacache.i18n.ondevice import OnDeviceTranslator
from linguacache.i18n.llm import LLMTranslator
from linguacache.i18n.localizer import (
    Localizer,
    LocalizerConfig,
)
from linguacache.i18n.selector import LanguageSelector
from linguacache.i18n.languages import (
    Language,
    SameLanguagePolicy,
    SUPPORTED_LANGUAGES,
    WARM_UP_LANGUAGES,
    get_language_name,
    get_language_by_code,
    normalize_language_code,
    primary_subtag,
    is_same_language,
)
from linguacache.i18n.warmup import (
    warm_translation_cache,
    warm_single_language,
    load_string_files,
)

__all__ = [
    # Core translation
    "Translator",
    "CachingTranslator",
    "PlaceholderMasker",
    "MaskResult",
    "PLACEHOLDER_PATTERNS",
    # Backends
    "OnDeviceTranslator",
    "LLMTranslator",
    # Facade
    "Localizer",
    "LocalizerConfig",
    "LanguageSelector",
    # Cache warming
    "warm_translation_cache",
    "warm_single_language",
    "load_string_files",
    # Language utilities
    "Language",
    "SameLanguagePolicy",
    "SUPPORTED_LANGUAGES",
    "WARM_UP_LANGUAGES",
    "get_language_name",
    "get_language_by_code",
    "normalize_language_code",
    "primary_subtag",
    "is_same_language",
]
