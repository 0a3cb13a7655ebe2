"""
Tests for CachingTranslator.

Core principle: the backing engine is called at most once per distinct
(text, language pair, context), and failures are never cached.
"""

import asyncio

import pytest

from conftest import FailingTranslator, ReorderingTranslator, StubTranslator
from linguacache.cache import PersistentTranslationCache
from linguacache.core.errors import TransientTranslationError, UnsupportedLanguageError
from linguacache.core.models import READY, CacheKey, CachePolicy, TranslationContext
from linguacache.i18n.translator import CachingTranslator
from linguacache.storage.local import InMemoryKeyValueStore


# =============================================================================
# Short Circuits
# =============================================================================


class TestShortCircuits:
    @pytest.mark.asyncio
    async def test_same_language_is_noop(self, stub_translator):
        translator = CachingTranslator(stub_translator)

        assert await translator.translate("Hello", "en", "EN") == "Hello"
        assert stub_translator.calls == []
        assert await translator.cache.size() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    async def test_blank_text_is_noop(self, stub_translator, text):
        translator = CachingTranslator(stub_translator)

        assert await translator.translate(text, "en", "es") == text
        assert stub_translator.calls == []

    @pytest.mark.asyncio
    async def test_region_variants_still_translate(self, stub_translator):
        translator = CachingTranslator(stub_translator)

        assert await translator.translate("Color", "en", "en-GB") == "[en-GB]Color"


# =============================================================================
# Caching
# =============================================================================


class TestCaching:
    @pytest.mark.asyncio
    async def test_hit_skips_engine(self, stub_translator):
        translator = CachingTranslator(stub_translator)

        first = await translator.translate("Hello", "en", "es")
        second = await translator.translate("Hello", "en", "es")

        assert first == second == "[es]Hello"
        assert len(stub_translator.calls) == 1

    @pytest.mark.asyncio
    async def test_context_separates_entries(self, stub_translator):
        translator = CachingTranslator(stub_translator)

        await translator.translate("Hello", "en", "es", TranslationContext.UI)
        await translator.translate("Hello", "en", "es", TranslationContext.SYSTEM)

        assert len(stub_translator.calls) == 2

    @pytest.mark.asyncio
    async def test_cached_under_original_text(self, stub_translator):
        translator = CachingTranslator(stub_translator)

        await translator.translate("Hi {name}", "en", "es")

        key = CacheKey.create("Hi {name}", "en", "es")
        assert await translator.cache.get(key) == "[es]Hi {name}"

    @pytest.mark.asyncio
    async def test_prepopulated_persistent_cache(self, stub_translator):
        cache = PersistentTranslationCache(InMemoryKeyValueStore())
        await cache.put(CacheKey.create("Save", "en", "de"), "Speichern")
        translator = CachingTranslator(stub_translator, cache=cache)

        assert await translator.translate("Save", "en", "de") == "Speichern"
        assert stub_translator.calls == []

    @pytest.mark.asyncio
    async def test_clear_cache(self, stub_translator):
        translator = CachingTranslator(stub_translator)
        await translator.translate("Hello", "en", "es")

        await translator.clear_cache()
        await translator.translate("Hello", "en", "es")

        assert len(stub_translator.calls) == 2

    @pytest.mark.asyncio
    async def test_concurrent_misses_all_succeed(self):
        engine = StubTranslator(delay=0.01)
        translator = CachingTranslator(engine)

        results = await asyncio.gather(*(translator.translate("Hello", "en", "es") for _ in range(5)))

        assert set(results) == {"[es]Hello"}
        assert await translator.cache.size() == 1


# =============================================================================
# Placeholder Protection
# =============================================================================


class TestPlaceholderProtection:
    @pytest.mark.asyncio
    async def test_engine_sees_tokens_only(self):
        engine = ReorderingTranslator()
        translator = CachingTranslator(engine)

        result = await translator.translate("Hello {name}", "en", "es")

        sent = engine.calls[0][0]
        assert "{name}" not in sent
        assert result == "{name} Hello"

    @pytest.mark.asyncio
    async def test_protection_disabled(self, stub_translator):
        translator = CachingTranslator(stub_translator, protect_placeholders=False)

        await translator.translate("Hello {name}", "en", "es")

        assert stub_translator.calls[0][0] == "Hello {name}"


# =============================================================================
# Failures
# =============================================================================


class TestFailures:
    @pytest.mark.asyncio
    async def test_failure_propagates_and_is_not_cached(self):
        engine = FailingTranslator()
        translator = CachingTranslator(engine)

        with pytest.raises(TransientTranslationError):
            await translator.translate("Hello", "en", "es")
        with pytest.raises(TransientTranslationError):
            await translator.translate("Hello", "en", "es")

        assert len(engine.calls) == 2
        assert await translator.cache.size() == 0

    @pytest.mark.asyncio
    async def test_unsupported_not_cached_by_default(self, unsupported_translator):
        translator = CachingTranslator(unsupported_translator)

        with pytest.raises(UnsupportedLanguageError):
            await translator.translate("Hello", "en", "xx")

        assert await translator.cache.size() == 0

    @pytest.mark.asyncio
    async def test_cache_failures_pins_original(self, unsupported_translator):
        policy = CachePolicy(persist=False, cache_failures=True)
        translator = CachingTranslator(unsupported_translator, policy=policy)

        with pytest.raises(UnsupportedLanguageError):
            await translator.translate("Hello", "en", "xx")

        assert await translator.translate("Hello", "en", "xx") == "Hello"
        assert len(unsupported_translator.calls) == 1


# =============================================================================
# Delegation
# =============================================================================


class TestDelegation:
    @pytest.mark.asyncio
    async def test_prepare_and_ready_pass_through(self, stub_translator):
        translator = CachingTranslator(stub_translator)

        assert await translator.is_ready("en", "es") is True
        assert await translator.prepare("en", "es") is READY

    def test_close_leaves_delegate_open(self, stub_translator):
        CachingTranslator(stub_translator).close()

        assert stub_translator.closed == 0
