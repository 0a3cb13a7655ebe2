"""
LLM-powered remote translator.

Uses DSPy so any provider litellm knows (Gemini, OpenAI, Anthropic)
can serve translations. Remote translators need no warm-up: they are
ready as soon as credentials are configured.
"""

from __future__ import annotations

import asyncio
import logging
import os
from functools import lru_cache
from typing import Any, Callable

import dspy
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from linguacache.config import get_settings
from linguacache.core.errors import (
    ModelNotAvailableError,
    TransientTranslationError,
    TranslationError,
    UnsupportedLanguageError,
)
from linguacache.core.models import READY, Failed, PrepareResult, TranslationContext
from linguacache.i18n.languages import get_language_by_code, get_language_name
from linguacache.i18n.placeholders import TOKEN_PREFIX
from linguacache.i18n.translator import Translator

logger = logging.getLogger(__name__)


# =============================================================================
# DSPy Signatures
# =============================================================================


class TranslateText(dspy.Signature):
    """Translate text while preserving meaning, tone, and style.

    Tokens such as ⟦PH0⟧ stand for values filled in later: copy every one
    of them into the translation exactly as written.
    """

    text: str = dspy.InputField(desc="Text to translate")
    source_language: str = dspy.InputField(desc="Source language name (e.g., 'English')")
    target_language: str = dspy.InputField(desc="Target language name (e.g., 'Spanish')")
    context: str = dspy.InputField(desc="What kind of text this is", default="")

    translated_text: str = dspy.OutputField(desc="Translated text, placeholder tokens unchanged")


CONTEXT_HINTS: dict[TranslationContext, str] = {
    TranslationContext.UI: "short user interface label or message",
    TranslationContext.BACKEND: "message returned by a server",
    TranslationContext.USER_CONTENT: "text written by a user; keep their voice",
    TranslationContext.SYSTEM: "system notification or error message",
}


# =============================================================================
# LM Client
# =============================================================================


PROVIDER_KEYS: dict[str, tuple[str, ...]] = {
    # Accept both GOOGLE_API_KEY and GEMINI_API_KEY
    "gemini": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    "openai": ("OPENAI_API_KEY",),
    "anthropic": ("ANTHROPIC_API_KEY",),
}


def provider_api_key(provider: str) -> str | None:
    for env_var in PROVIDER_KEYS.get(provider, ()):
        if os.getenv(env_var):
            return os.getenv(env_var)
    return None


@lru_cache
def get_lm(provider: str | None = None, model: str | None = None) -> dspy.LM:
    """
    Get configured language model.

    Args:
        provider: 'gemini', 'openai', or 'anthropic'. Defaults to settings.
        model: Model name. Defaults to the provider's model in settings.

    Returns:
        Configured DSPy LM instance.
    """
    settings = get_settings()
    provider = provider or settings.llm_provider

    if provider not in PROVIDER_KEYS:
        raise ValueError(f"Unknown provider: {provider}")

    api_key = provider_api_key(provider)
    if not api_key:
        raise ValueError(f"{' or '.join(PROVIDER_KEYS[provider])} not set")

    model = model or settings.model_for(provider)

    # litellm routes on the provider prefix
    return dspy.LM(model=f"{provider}/{model}", api_key=api_key)


# =============================================================================
# Translator
# =============================================================================


class LLMTranslator(Translator):
    """
    Remote translator backed by an LLM.

    Usage:
        translator = LLMTranslator(provider="openai")
        await translator.translate("Save", "en", "de")  # -> "Speichern"

    Transient provider failures are retried with exponential backoff
    before surfacing as TransientTranslationError.
    """

    def __init__(
        self,
        provider: str | None = None,
        model: str | None = None,
        predictor: Callable[..., Any] | None = None,
        max_attempts: int = 3,
        retry_wait: Any = None,
    ):
        self.provider = provider or get_settings().llm_provider
        self.model = model
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)
        self._predictor = predictor
        self._lm: dspy.LM | None = None

    @property
    def predictor(self) -> Callable[..., Any]:
        """Lazy DSPy predictor bound to this translator's LM."""
        if self._predictor is None:
            try:
                self._lm = get_lm(self.provider, self.model)
            except ValueError as e:
                raise ModelNotAvailableError(
                    self.provider, f"LLM provider '{self.provider}' not configured: {e}", e
                ) from e
            self._predictor = dspy.Predict(TranslateText)
        return self._predictor

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        context: TranslationContext = TranslationContext.UI,
    ) -> str:
        if not text or not text.strip():
            return text

        for tag in (source_lang, target_lang):
            if get_language_by_code(tag) is None:
                raise UnsupportedLanguageError(tag)

        result = await self._predict(
            text=text,
            source_language=get_language_name(source_lang),
            target_language=get_language_name(target_lang),
            context=CONTEXT_HINTS.get(TranslationContext(context), "general text"),
        )

        translation = getattr(result, "translated_text", None)
        if not isinstance(translation, str) or not translation.strip():
            raise TransientTranslationError("LLM returned an empty translation")

        if TOKEN_PREFIX in text and TOKEN_PREFIX not in translation:
            logger.warning("LLM dropped every placeholder token")

        return translation.strip()

    async def is_ready(self, source_lang: str, target_lang: str) -> bool:
        if get_language_by_code(source_lang) is None or get_language_by_code(target_lang) is None:
            return False
        return self._predictor is not None or provider_api_key(self.provider) is not None

    async def prepare(self, source_lang: str, target_lang: str) -> PrepareResult:
        for tag in (source_lang, target_lang):
            if get_language_by_code(tag) is None:
                return Failed(UnsupportedLanguageError(tag))
        try:
            _ = self.predictor
        except ModelNotAvailableError as e:
            return Failed(e)
        return READY

    async def _predict(self, **kwargs: Any) -> Any:
        predictor = self.predictor

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception_type(TransientTranslationError),
            reraise=True,
        ):
            with attempt:
                try:
                    return await asyncio.to_thread(self._call_predictor, predictor, kwargs)
                except TranslationError:
                    raise
                except Exception as e:
                    logger.warning(f"LLM translation attempt failed: {e}")
                    raise TransientTranslationError(f"LLM translation failed: {e}", e) from e

    def _call_predictor(self, predictor: Callable[..., Any], kwargs: dict[str, Any]) -> Any:
        if self._lm is not None:
            with dspy.context(lm=self._lm):
                return predictor(**kwargs)
        return predictor(**kwargs)
