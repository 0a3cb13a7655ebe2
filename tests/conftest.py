"""
Shared test doubles.

Translators here are deterministic and record every call so tests can
assert on what actually reached the backing engine.
"""

from __future__ import annotations

import asyncio

import pytest

from linguacache.core.errors import TransientTranslationError, UnsupportedLanguageError
from linguacache.core.models import TranslationContext
from linguacache.i18n.ondevice import OnDeviceTranslator
from linguacache.i18n.translator import Translator


# =============================================================================
# Translators
# =============================================================================


class StubTranslator(Translator):
    """Wraps text as [target]text and records every call."""

    def __init__(self, delay: float = 0.0):
        self.calls: list[tuple[str, str, str, TranslationContext]] = []
        self.delay = delay
        self.closed = 0

    async def translate(self, text, source_lang, target_lang, context=TranslationContext.UI):
        self.calls.append((text, source_lang, target_lang, context))
        if self.delay:
            await asyncio.sleep(self.delay)
        return f"[{target_lang}]{text}"

    def close(self):
        self.closed += 1


class ReorderingTranslator(StubTranslator):
    """Reverses word order, the way real translations move placeholders around."""

    async def translate(self, text, source_lang, target_lang, context=TranslationContext.UI):
        self.calls.append((text, source_lang, target_lang, context))
        return " ".join(reversed(text.split(" ")))


class FailingTranslator(StubTranslator):
    """Raises the given error on every call."""

    def __init__(self, error: Exception | None = None):
        super().__init__()
        self.error = error or TransientTranslationError("backend unavailable")

    async def translate(self, text, source_lang, target_lang, context=TranslationContext.UI):
        self.calls.append((text, source_lang, target_lang, context))
        raise self.error


class FakeOnDeviceTranslator(OnDeviceTranslator):
    """
    On-device translator with an in-memory model registry.

    Downloads block on `release` (when given) so tests can observe
    in-flight state; `fail_downloads` makes them raise instead.
    """

    def __init__(
        self,
        supported_languages=("en", "es", "fr", "de"),
        downloaded=("en",),
        wait_for_download=True,
        release: asyncio.Event | None = None,
        fail_downloads: bool = False,
    ):
        super().__init__(supported_languages, wait_for_download=wait_for_download)
        self.models: set[str] = set(downloaded)
        self.release = release
        self.fail_downloads = fail_downloads
        self.download_calls: list[str] = []
        self.released = 0

    async def _translate_text(self, text, source, target):
        return f"<{target}>{text}"

    async def _is_model_downloaded(self, language):
        return language in self.models

    async def _download_model(self, language, on_progress):
        self.download_calls.append(language)
        on_progress(0.5)
        if self.release is not None:
            await self.release.wait()
        if self.fail_downloads:
            raise OSError("disk full")
        on_progress(1.0)
        self.models.add(language)

    async def _delete_model(self, language):
        if language in self.models:
            self.models.discard(language)
            return True
        return False

    async def _list_downloaded_models(self):
        return sorted(self.models)

    def _release(self):
        self.released += 1


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def stub_translator():
    """Recording translator that never fails."""
    return StubTranslator()


@pytest.fixture
def unsupported_translator():
    """Translator that rejects every language pair."""
    return FailingTranslator(UnsupportedLanguageError("xx"))
