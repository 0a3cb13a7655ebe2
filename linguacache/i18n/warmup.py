"""
Cache warming for translations.

Pre-translates static strings (UI labels, messages from YAML string
files) into priority languages so users never hit a cold cache after a
language switch.

Run on:
- Application startup (optional, async)
- Deploy (recommended)

Usage:
    # Warm priority languages through an existing caching translator
    await warm_translation_cache(localizer.translator)

    # Specific languages and extra strings
    await warm_translation_cache(translator, languages=["es", "fr"], texts=["Checkout"])

    # CLI
    linguacache-warmup --languages es fr --strings-dir config/strings
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

from linguacache.core.models import CacheKey, Failed, TranslationContext
from linguacache.i18n.languages import (
    WARM_UP_LANGUAGES,
    Language,
    get_language_name,
    is_same_language,
)
from linguacache.i18n.translator import CachingTranslator

logger = logging.getLogger(__name__)


# =============================================================================
# Content Loaders
# =============================================================================


def _collect_strings(data: Any) -> list[str]:
    if isinstance(data, str):
        return [data]
    if isinstance(data, list):
        return [s for item in data for s in _collect_strings(item)]
    if isinstance(data, dict):
        if "strings" in data:
            return _collect_strings(data["strings"])
        return [s for value in data.values() for s in _collect_strings(value)]
    return []


def load_string_files(strings_dir: str | Path = "config/strings") -> list[str]:
    """
    Load translatable strings from YAML files.

    Accepts a plain list, a {"strings": [...]} document, or a nested
    mapping of message ids to strings.
    """
    strings: list[str] = []
    path = Path(strings_dir)

    if not path.exists():
        logger.warning(f"String directory not found: {strings_dir}")
        return strings

    for yaml_file in sorted([*path.glob("*.yaml"), *path.glob("*.yml")]):
        try:
            with open(yaml_file, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Error loading {yaml_file}: {e}")
            continue

        loaded = _collect_strings(data)
        strings.extend(loaded)
        logger.info(f"Loaded {len(loaded)} strings from {yaml_file.name}")

    return [s for s in strings if s and s.strip()]


# Common UI strings that should be pre-translated
UI_STRINGS = [
    # Navigation
    "Home",
    "Back",
    "Menu",
    "Settings",
    "Language",
    "Profile",
    # Actions
    "Cancel",
    "Confirm",
    "Send",
    "Add to cart",
    "Checkout",
    "Search",
    "Retry",
    "Sign in",
    "Sign out",
    # Status
    "Loading...",
    "Translating...",
    "Order placed",
    "Message sent",
    "No results found",
    # Errors
    "Something went wrong",
    "Check your connection and try again",
    "Connection lost",
    "This field is required",
]


# =============================================================================
# Cache Warming
# =============================================================================


async def warm_translation_cache(
    translator: CachingTranslator,
    languages: list[str | Language] | None = None,
    source: str = "en",
    texts: list[str] | None = None,
    include_ui: bool = True,
    strings_dir: str | Path | None = None,
    context: TranslationContext = TranslationContext.UI,
    concurrency: int = 8,
) -> dict[str, Any]:
    """
    Pre-warm the translation cache.

    Each language pair is prepared first; a pair that fails to prepare
    is skipped. Strings already cached are not translated again.

    Args:
        translator: Caching translator whose cache gets warmed
        languages: Target languages (defaults to WARM_UP_LANGUAGES)
        source: Source language of the strings
        texts: Extra strings to warm
        include_ui: Include the built-in UI strings
        strings_dir: Directory of YAML string files to include
        context: Translation context for every string
        concurrency: Max concurrent translations per language

    Returns:
        Stats dict with counts
    """
    if languages is None:
        languages = WARM_UP_LANGUAGES

    lang_codes = [lang.value if isinstance(lang, Language) else str(lang) for lang in languages]

    all_texts: list[str] = list(texts or [])
    if include_ui:
        all_texts.extend(UI_STRINGS)
    if strings_dir is not None:
        all_texts.extend(load_string_files(strings_dir))

    # Deduplicate, keep order
    all_texts = list(dict.fromkeys(t for t in all_texts if t and t.strip()))

    stats = {
        "languages": len(lang_codes),
        "texts": len(all_texts),
        "translations": 0,
        "cached": 0,
        "errors": 0,
        "skipped_languages": [],
    }

    logger.info(f"Warming {len(all_texts)} strings x {len(lang_codes)} languages")

    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def warm_one(text: str, target: str) -> None:
        key = CacheKey.create(text, source, target, context)
        if await translator.cache.get(key) is not None:
            stats["cached"] += 1
            return
        async with semaphore:
            try:
                await translator.translate(text, source, target, context)
            except Exception as e:
                stats["errors"] += 1
                logger.warning(f"Warm-up translation to {target} failed: {e}")
                return
        stats["translations"] += 1

    for lang in lang_codes:
        if is_same_language(source, lang):
            continue

        result = await translator.prepare(source, lang)
        if isinstance(result, Failed):
            stats["skipped_languages"].append(lang)
            logger.warning(f"Skipping {get_language_name(lang)} ({lang}): {result.error}")
            continue

        await asyncio.gather(*(warm_one(text, lang) for text in all_texts))
        logger.info(f"Warmed {get_language_name(lang)} ({lang})")

    logger.info(
        f"Warm-up complete: {stats['translations']} translated, "
        f"{stats['cached']} already cached, {stats['errors']} errors"
    )
    return stats


async def warm_single_language(
    translator: CachingTranslator,
    language: str | Language,
    source: str = "en",
    texts: list[str] | None = None,
) -> dict[str, Any]:
    """Warm cache for a single language (e.g. when a user switches to it)."""
    return await warm_translation_cache(
        translator,
        languages=[language],
        source=source,
        texts=texts,
    )


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> None:
    """Run cache warm-up from command line."""
    from linguacache.config import get_settings
    from linguacache.i18n.llm import LLMTranslator
    from linguacache.i18n.localizer import Localizer
    from linguacache.integrations.sentry import init_sentry

    parser = argparse.ArgumentParser(
        description="Warm translation cache for priority languages"
    )
    parser.add_argument(
        "--languages", "-l",
        nargs="+",
        help="Specific languages to warm (default: priority languages)"
    )
    parser.add_argument(
        "--source", "-s",
        default=None,
        help="Source language of the strings (default: settings)"
    )
    parser.add_argument(
        "--strings-dir",
        default=None,
        help="Directory of YAML string files"
    )
    parser.add_argument(
        "--provider",
        default=None,
        help="LLM provider: gemini, openai or anthropic"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output"
    )

    args = parser.parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_sentry()

    localizer = Localizer.from_settings(settings, translator=LLMTranslator(provider=args.provider))
    try:
        stats = asyncio.run(warm_translation_cache(
            localizer.translator,
            languages=args.languages,
            source=args.source or settings.source_language,
            strings_dir=args.strings_dir,
        ))
    finally:
        localizer.close()

    if not args.quiet:
        print(f"Languages warmed: {stats['languages'] - len(stats['skipped_languages'])}")
        print(f"Unique texts: {stats['texts']}")
        print(f"Already cached: {stats['cached']}")
        print(f"New translations: {stats['translations']}")
        print(f"Errors: {stats['errors']}")


if __name__ == "__main__":
    main()
