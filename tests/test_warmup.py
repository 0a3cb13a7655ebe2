"""
Tests for cache warm-up.
"""

import pytest

from conftest import FakeOnDeviceTranslator, StubTranslator
from linguacache.core.models import CacheKey
from linguacache.i18n.translator import CachingTranslator
from linguacache.i18n.warmup import (
    UI_STRINGS,
    load_string_files,
    warm_single_language,
    warm_translation_cache,
)


@pytest.fixture
def strings_dir(tmp_path):
    (tmp_path / "checkout.yaml").write_text(
        "strings:\n  - Checkout\n  - Pay now\n",
        encoding="utf-8",
    )
    (tmp_path / "errors.yml").write_text(
        "errors:\n  not_found: Page not found\n  offline: Connection lost\n",
        encoding="utf-8",
    )
    (tmp_path / "broken.yaml").write_text("key: [unclosed", encoding="utf-8")
    return tmp_path


# =============================================================================
# Loaders
# =============================================================================


class TestLoadStringFiles:
    def test_loads_lists_and_mappings(self, strings_dir):
        strings = load_string_files(strings_dir)

        assert strings == ["Checkout", "Pay now", "Page not found", "Connection lost"]

    def test_missing_directory(self, tmp_path):
        assert load_string_files(tmp_path / "nope") == []


# =============================================================================
# Warming
# =============================================================================


class TestWarmTranslationCache:
    @pytest.mark.asyncio
    async def test_warms_every_pair(self):
        engine = StubTranslator()
        translator = CachingTranslator(engine)

        stats = await warm_translation_cache(
            translator, languages=["es", "fr"], texts=["Checkout"], include_ui=False
        )

        assert stats["translations"] == 2
        assert stats["errors"] == 0
        assert await translator.cache.get(CacheKey.create("Checkout", "en", "fr")) == "[fr]Checkout"

    @pytest.mark.asyncio
    async def test_second_run_hits_cache(self):
        engine = StubTranslator()
        translator = CachingTranslator(engine)

        await warm_single_language(translator, "de")
        stats = await warm_single_language(translator, "de")

        assert stats["translations"] == 0
        assert stats["cached"] == len(UI_STRINGS)
        assert len(engine.calls) == len(UI_STRINGS)

    @pytest.mark.asyncio
    async def test_includes_string_files_and_dedupes(self, strings_dir):
        engine = StubTranslator()
        translator = CachingTranslator(engine)

        stats = await warm_translation_cache(
            translator, languages=["es"], texts=["Checkout"], strings_dir=strings_dir
        )

        # "Checkout" and "Connection lost" are already UI strings
        assert stats["texts"] == len(UI_STRINGS) + 2

    @pytest.mark.asyncio
    async def test_skips_languages_that_fail_to_prepare(self):
        engine = FakeOnDeviceTranslator(downloaded=("en",))
        translator = CachingTranslator(engine)

        stats = await warm_translation_cache(
            translator, languages=["xx", "es"], texts=["Hello"], include_ui=False
        )

        assert stats["skipped_languages"] == ["xx"]
        assert stats["translations"] == 1
        assert engine.download_calls == ["es"]
