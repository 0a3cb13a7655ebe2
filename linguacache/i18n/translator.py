"""
Translator contract and the caching decorator.

A Translator is any backing engine: an on-device model, a cloud API, an
LLM. CachingTranslator wraps one with placeholder protection and a
TranslationCache and is what application code actually calls.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from linguacache.cache.base import TranslationCache
from linguacache.cache.memory import LruTranslationCache
from linguacache.core.errors import UnsupportedLanguageError
from linguacache.core.models import (
    READY,
    CacheKey,
    CachePolicy,
    PrepareResult,
    TranslationContext,
)
from linguacache.i18n.placeholders import PlaceholderMasker

logger = logging.getLogger(__name__)


# =============================================================================
# Translator Contract
# =============================================================================


class Translator(ABC):
    """
    Contract every backing translation engine implements.

    Example:
        class UpperCaseTranslator(Translator):
            async def translate(self, text, source_lang, target_lang, context=TranslationContext.UI):
                return text.upper()
    """

    @abstractmethod
    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        context: TranslationContext = TranslationContext.UI,
    ) -> str:
        """
        Translate text from source_lang to target_lang.

        Args:
            text: Text to translate
            source_lang: BCP 47 tag of the source language (e.g. "en")
            target_lang: BCP 47 tag of the target language
            context: Where the text came from

        Returns:
            Translated text

        Raises:
            TranslationError: engine could not produce output
        """
        pass

    async def is_ready(self, source_lang: str, target_lang: str) -> bool:
        """Whether the pair can be served right now (models present, credentials set)."""
        return True

    async def prepare(self, source_lang: str, target_lang: str) -> PrepareResult:
        """Do whatever warm-up the pair needs. Ready immediately if none."""
        return READY

    def close(self) -> None:
        """Release held resources. Safe to call more than once."""
        pass


# =============================================================================
# Caching Translator
# =============================================================================


class CachingTranslator(Translator):
    """
    Adds caching and placeholder protection to a delegate translator.

    Usage:
        translator = CachingTranslator(MyEngine())

        # Cache miss: masks placeholders, calls the engine, caches the result
        await translator.translate("Hello {name}", "en", "es")

        # Cache hit: the engine is not called again
        await translator.translate("Hello {name}", "en", "es")

    Failures from the delegate propagate unchanged and are never cached,
    so a transient error is retried from scratch on the next call. The
    one exception is CachePolicy.cache_failures, which pins the original
    text for languages the delegate reports as unsupported.

    The delegate is shared by reference: close() does not close it.
    """

    def __init__(
        self,
        delegate: Translator,
        cache: TranslationCache | None = None,
        masker: PlaceholderMasker | None = None,
        protect_placeholders: bool = True,
        policy: CachePolicy | None = None,
    ):
        self.policy = policy or CachePolicy.memory_only()
        self.delegate = delegate
        self.cache = cache if cache is not None else LruTranslationCache(
            max_entries=self.policy.max_memory_entries,
            ttl_seconds=self.policy.ttl_seconds,
        )
        self.masker = masker or PlaceholderMasker()
        self.protect_placeholders = protect_placeholders

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        context: TranslationContext = TranslationContext.UI,
    ) -> str:
        # Same language? Return as-is, nothing cached
        if source_lang.lower() == target_lang.lower():
            return text

        if not text or not text.strip():
            return text

        key = CacheKey.create(text, source_lang, target_lang, context)

        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit {key}")
            return cached

        logger.debug(f"Cache miss {key}")

        try:
            if self.protect_placeholders:
                translated = await self.masker.translate_with_protection(
                    text,
                    lambda masked: self.delegate.translate(masked, source_lang, target_lang, context),
                )
            else:
                translated = await self.delegate.translate(text, source_lang, target_lang, context)
        except UnsupportedLanguageError:
            if self.policy.cache_failures:
                await self.cache.put(key, text)
            raise

        await self.cache.put(key, translated)
        return translated

    async def is_ready(self, source_lang: str, target_lang: str) -> bool:
        return await self.delegate.is_ready(source_lang, target_lang)

    async def prepare(self, source_lang: str, target_lang: str) -> PrepareResult:
        return await self.delegate.prepare(source_lang, target_lang)

    async def clear_cache(self) -> None:
        """Clear the translation cache."""
        await self.cache.clear()
