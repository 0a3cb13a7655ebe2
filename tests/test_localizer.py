"""
Tests for the Localizer facade.

Core principle: translate() always returns something displayable. On
any failure the user sees the original text, never an exception.
"""

import logging

import pytest

from conftest import FailingTranslator, StubTranslator
from linguacache.config import Settings
from linguacache.core.errors import ModelNotAvailableError
from linguacache.core.models import READY, CachePolicy, Failed, TranslationContext
from linguacache.i18n.languages import SameLanguagePolicy
from linguacache.i18n.localizer import Localizer, LocalizerConfig
from linguacache.i18n.selector import LanguageSelector
from linguacache.storage.local import JsonFileKeyValueStore


def make_localizer(translator=None, **overrides) -> Localizer:
    config = LocalizerConfig(
        source_language="en",
        supported_languages=["en", "es", "fr"],
        translator=translator,
        cache_policy=CachePolicy.memory_only(100),
        **overrides,
    )
    return Localizer(config)


# =============================================================================
# Translation
# =============================================================================


class TestTranslate:
    @pytest.mark.asyncio
    async def test_translates_into_current_language(self, stub_translator):
        localizer = make_localizer(stub_translator)
        localizer.set_language("es")

        assert await localizer.translate("Hello") == "[es]Hello"

    @pytest.mark.asyncio
    async def test_source_language_is_noop(self, stub_translator):
        localizer = make_localizer(stub_translator)

        assert await localizer.translate("Hello") == "Hello"
        assert stub_translator.calls == []

    @pytest.mark.asyncio
    async def test_primary_subtag_policy(self, stub_translator):
        localizer = make_localizer(
            stub_translator,
            target_language="en-US",
            same_language_policy=SameLanguagePolicy.PRIMARY_SUBTAG,
        )

        assert await localizer.translate("Color") == "Color"
        assert stub_translator.calls == []

    @pytest.mark.asyncio
    async def test_no_translator_returns_original(self):
        localizer = make_localizer(None, target_language="es")

        assert await localizer.translate("Hello") == "Hello"

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_original(self, caplog):
        engine = FailingTranslator(ModelNotAvailableError("es"))
        localizer = make_localizer(engine, target_language="es")

        with caplog.at_level(logging.ERROR):
            result = await localizer.translate("Secret message")

        assert result == "Secret message"
        assert "en->es failed" in caplog.text
        assert "Secret message" not in caplog.text

    @pytest.mark.asyncio
    async def test_timeout_falls_back_to_original(self):
        engine = StubTranslator(delay=1.0)
        localizer = make_localizer(engine, target_language="es", translate_timeout_seconds=0.05)

        assert await localizer.translate("Hello") == "Hello"

    @pytest.mark.asyncio
    async def test_translate_many_preserves_order(self, stub_translator):
        localizer = make_localizer(stub_translator, target_language="fr")

        result = await localizer.translate_many(["One", "Two", "Three"])

        assert result == ["[fr]One", "[fr]Two", "[fr]Three"]
        assert await localizer.translate_many([]) == []

    @pytest.mark.asyncio
    async def test_context_is_forwarded(self, stub_translator):
        localizer = make_localizer(stub_translator, target_language="es")

        await localizer.translate("Hello", TranslationContext.USER_CONTENT)

        assert stub_translator.calls[0][3] == TranslationContext.USER_CONTENT


# =============================================================================
# Cache
# =============================================================================


class TestCache:
    @pytest.mark.asyncio
    async def test_repeat_served_from_cache(self, stub_translator):
        localizer = make_localizer(stub_translator, target_language="es")

        await localizer.translate("Hello")
        await localizer.translate("Hello")

        assert len(stub_translator.calls) == 1

    @pytest.mark.asyncio
    async def test_clear_cache(self, stub_translator):
        localizer = make_localizer(stub_translator, target_language="es")
        await localizer.translate("Hello")

        await localizer.clear_cache()
        await localizer.translate("Hello")

        assert len(stub_translator.calls) == 2

    @pytest.mark.asyncio
    async def test_default_config_keeps_memory_bounded(self, stub_translator):
        localizer = Localizer(LocalizerConfig(
            supported_languages=["en", "es"],
            target_language="es",
            translator=stub_translator,
            cache_policy=CachePolicy(max_memory_entries=50),
        ))

        await localizer.translate_many([f"Message {i}" for i in range(300)])

        assert await localizer.cache.size() == 50

    @pytest.mark.asyncio
    async def test_cache_survives_translator_swap(self, stub_translator):
        localizer = make_localizer(stub_translator, target_language="es")
        await localizer.translate("Hello")

        replacement = StubTranslator()
        localizer.set_translator(replacement)

        assert await localizer.translate("Hello") == "[es]Hello"
        assert replacement.calls == []
        assert stub_translator.closed == 1


# =============================================================================
# Languages
# =============================================================================


class TestLanguages:
    def test_unsupported_language_rejected(self, stub_translator):
        localizer = make_localizer(stub_translator)

        with pytest.raises(ValueError):
            localizer.set_language("ja")
        assert localizer.target_language == "en"

    def test_shared_selector(self, stub_translator):
        selector = LanguageSelector("fr", supported=["en", "fr"])
        localizer = Localizer(LocalizerConfig(translator=stub_translator), selector=selector)

        assert localizer.target_language == "fr"


# =============================================================================
# Readiness & Lifecycle
# =============================================================================


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_readiness_without_translator(self):
        localizer = make_localizer(None, target_language="es")

        assert await localizer.is_ready() is False
        result = await localizer.prepare()
        assert isinstance(result, Failed)
        assert isinstance(result.error, ModelNotAvailableError)

    @pytest.mark.asyncio
    async def test_readiness_delegates(self, stub_translator):
        localizer = make_localizer(stub_translator, target_language="es")

        assert await localizer.is_ready() is True
        assert await localizer.prepare() is READY

    def test_close_closes_translator(self, stub_translator):
        localizer = make_localizer(stub_translator)

        localizer.close()

        assert stub_translator.closed == 1

    def test_from_settings(self, tmp_path, stub_translator):
        settings = Settings(
            source_language="en",
            target_language="de",
            supported_languages="en, de",
            cache_path=str(tmp_path / "cache.json"),
            translate_timeout_seconds=5,
        )

        localizer = Localizer.from_settings(settings, translator=stub_translator)

        assert localizer.target_language == "de"
        assert localizer.config.supported_languages == ["en", "de"]
        assert localizer.config.translate_timeout_seconds == 5
        assert isinstance(localizer.cache.store, JsonFileKeyValueStore)
