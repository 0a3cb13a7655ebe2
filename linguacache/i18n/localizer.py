"""
Localizer - the application-facing facade.

Build one at startup from a LocalizerConfig and pass it to whatever
needs translations. It owns the cache and the caching translator; the
backing translator it is given is closed by Localizer.close().

Usage:
    localizer = Localizer(LocalizerConfig(
        source_language="en",
        supported_languages=["en", "es", "fr"],
        translator=LLMTranslator(),
    ))

    localizer.set_language("es")
    await localizer.prepare()
    title = await localizer.translate("Hello, {name}!")

translate() never raises: on any failure it logs, reports, and returns
the original text.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import BaseModel, Field

from linguacache.cache import TranslationCache, create_cache
from linguacache.config import Settings, get_settings
from linguacache.core.errors import ModelNotAvailableError
from linguacache.core.models import CachePolicy, Failed, PrepareResult, TranslationContext
from linguacache.i18n.languages import SameLanguagePolicy, is_same_language
from linguacache.i18n.selector import LanguageSelector
from linguacache.i18n.translator import CachingTranslator, Translator
from linguacache.integrations.sentry import capture_exception
from linguacache.storage.base import KeyValueStore
from linguacache.storage.local import JsonFileKeyValueStore

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


class LocalizerConfig(BaseModel):
    """Everything a Localizer needs, configured once by the application."""

    model_config = {"arbitrary_types_allowed": True}

    source_language: str = "en"
    target_language: str | None = None  # Defaults to source_language
    supported_languages: list[str] = Field(default_factory=lambda: ["en"])
    translator: Translator | None = None
    cache_policy: CachePolicy = Field(default_factory=CachePolicy.default)
    same_language_policy: SameLanguagePolicy = SameLanguagePolicy.EXACT
    protect_placeholders: bool = True
    translate_timeout_seconds: float | None = Field(default=30.0, gt=0)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        translator: Translator | None = None,
    ) -> LocalizerConfig:
        settings = settings or get_settings()
        return cls(
            source_language=settings.source_language,
            target_language=settings.target_language,
            supported_languages=settings.supported_languages_list or [settings.source_language],
            translator=translator,
            cache_policy=CachePolicy.from_settings(settings),
            same_language_policy=SameLanguagePolicy(settings.same_language_policy),
            protect_placeholders=settings.protect_placeholders,
            translate_timeout_seconds=settings.translate_timeout_seconds,
        )


# =============================================================================
# Localizer
# =============================================================================


class Localizer:
    """Translate application text into the currently selected language."""

    def __init__(
        self,
        config: LocalizerConfig | None = None,
        selector: LanguageSelector | None = None,
        cache: TranslationCache | None = None,
        store: KeyValueStore | None = None,
    ):
        self.config = config or LocalizerConfig()
        self.selector = selector or LanguageSelector(
            self.config.target_language or self.config.source_language,
            supported=self.config.supported_languages,
        )
        self.cache = cache if cache is not None else create_cache(self.config.cache_policy, store)

        self._translator: CachingTranslator | None = None
        if self.config.translator is not None:
            self._translator = self._wrap(self.config.translator)

        logger.info(
            f"Localizer initialized with {len(self.config.supported_languages)} supported languages"
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        translator: Translator | None = None,
    ) -> Localizer:
        """Build a Localizer from environment settings, with a JSON file cache when persistence is on."""
        settings = settings or get_settings()
        config = LocalizerConfig.from_settings(settings, translator)
        store = JsonFileKeyValueStore(settings.cache_path) if settings.cache_persist else None
        return cls(config, store=store)

    # =========================================================================
    # Languages
    # =========================================================================

    @property
    def source_language(self) -> str:
        return self.config.source_language

    @property
    def target_language(self) -> str:
        return self.selector.current

    def set_language(self, tag: str) -> None:
        self.selector.set_language(tag)

    # =========================================================================
    # Translator
    # =========================================================================

    @property
    def translator(self) -> CachingTranslator | None:
        return self._translator

    def set_translator(self, translator: Translator) -> None:
        """Swap the backing translator. The cache is kept; the old translator is closed."""
        if self._translator is not None and self._translator.delegate is not translator:
            self._translator.delegate.close()
        self._translator = self._wrap(translator)

    def _wrap(self, translator: Translator) -> CachingTranslator:
        return CachingTranslator(
            delegate=translator,
            cache=self.cache,
            protect_placeholders=self.config.protect_placeholders,
            policy=self.config.cache_policy,
        )

    # =========================================================================
    # Translation
    # =========================================================================

    async def translate(
        self,
        text: str,
        context: TranslationContext = TranslationContext.UI,
    ) -> str:
        """
        Translate text from the source language into the current language.

        Returns:
            The translation, or the original text if there is no
            translator, the languages match, or translation failed
        """
        translator = self._translator
        if translator is None:
            logger.warning("No translator configured, returning original text")
            return text

        source = self.source_language
        target = self.target_language

        if is_same_language(source, target, self.config.same_language_policy):
            return text

        try:
            pending = translator.translate(text, source, target, context)
            if self.config.translate_timeout_seconds is not None:
                return await asyncio.wait_for(pending, self.config.translate_timeout_seconds)
            return await pending
        except Exception as e:
            logger.exception(
                f"Translation {source}->{target} failed for {len(text)} chars, returning original text"
            )
            capture_exception(e, source_lang=source, target_lang=target, context=TranslationContext(context).value)
            return text

    async def translate_many(
        self,
        texts: list[str],
        context: TranslationContext = TranslationContext.UI,
    ) -> list[str]:
        """Translate independent texts concurrently, preserving order."""
        if not texts:
            return []
        return list(await asyncio.gather(*(self.translate(t, context) for t in texts)))

    # =========================================================================
    # Readiness
    # =========================================================================

    async def is_ready(self) -> bool:
        """Whether the translator can serve the current language pair now."""
        if self._translator is None:
            return False
        return await self._translator.is_ready(self.source_language, self.target_language)

    async def prepare(self) -> PrepareResult:
        """
        Warm up the translator for the current language pair (e.g. download models).

        Without a translator nothing can be served, so the result is Failed,
        matching is_ready().
        """
        if self._translator is None:
            return Failed(ModelNotAvailableError(self.target_language, "No translator configured"))
        logger.info(f"Preparing translator for {self.source_language}->{self.target_language}")
        return await self._translator.prepare(self.source_language, self.target_language)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def clear_cache(self) -> None:
        await self.cache.clear()

    def close(self) -> None:
        """Close the backing translator. Safe to call more than once."""
        if self._translator is not None:
            self._translator.delegate.close()
