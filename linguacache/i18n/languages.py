"""
Language tags and utilities.

Tags are BCP 47 strings ("en", "pt-BR", "zh-TW"). Comparisons are
case-insensitive; whether "en" and "en-US" count as the same language
is a policy choice, not a rule.
"""

from __future__ import annotations

import re
from enum import Enum


class Language(str, Enum):
    """Languages with a known display name."""

    AF = "af"
    AR = "ar"
    BE = "be"
    BG = "bg"
    BN = "bn"
    CA = "ca"
    CS = "cs"
    CY = "cy"
    DA = "da"
    DE = "de"
    EL = "el"
    EN = "en"
    EO = "eo"
    ES = "es"
    ET = "et"
    FA = "fa"
    FI = "fi"
    FR = "fr"
    GA = "ga"
    GL = "gl"
    GU = "gu"
    HE = "he"
    HI = "hi"
    HR = "hr"
    HT = "ht"
    HU = "hu"
    ID = "id"
    IS = "is"
    IT = "it"
    JA = "ja"
    KA = "ka"
    KN = "kn"
    KO = "ko"
    LT = "lt"
    LV = "lv"
    MK = "mk"
    MR = "mr"
    MS = "ms"
    MT = "mt"
    NL = "nl"
    NO = "no"
    PL = "pl"
    PT = "pt"
    RO = "ro"
    RU = "ru"
    SK = "sk"
    SL = "sl"
    SQ = "sq"
    SV = "sv"
    SW = "sw"
    TA = "ta"
    TE = "te"
    TH = "th"
    TL = "tl"
    TR = "tr"
    UK = "uk"
    UR = "ur"
    VI = "vi"
    ZH = "zh"


# Human-readable names
LANGUAGE_NAMES: dict[str, str] = {
    "af": "Afrikaans",
    "ar": "Arabic",
    "be": "Belarusian",
    "bg": "Bulgarian",
    "bn": "Bengali",
    "ca": "Catalan",
    "cs": "Czech",
    "cy": "Welsh",
    "da": "Danish",
    "de": "German",
    "el": "Greek",
    "en": "English",
    "eo": "Esperanto",
    "es": "Spanish",
    "et": "Estonian",
    "fa": "Persian",
    "fi": "Finnish",
    "fr": "French",
    "ga": "Irish",
    "gl": "Galician",
    "gu": "Gujarati",
    "he": "Hebrew",
    "hi": "Hindi",
    "hr": "Croatian",
    "ht": "Haitian Creole",
    "hu": "Hungarian",
    "id": "Indonesian",
    "is": "Icelandic",
    "it": "Italian",
    "ja": "Japanese",
    "ka": "Georgian",
    "kn": "Kannada",
    "ko": "Korean",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "mk": "Macedonian",
    "mr": "Marathi",
    "ms": "Malay",
    "mt": "Maltese",
    "nl": "Dutch",
    "no": "Norwegian",
    "pl": "Polish",
    "pt": "Portuguese",
    "ro": "Romanian",
    "ru": "Russian",
    "sk": "Slovak",
    "sl": "Slovenian",
    "sq": "Albanian",
    "sv": "Swedish",
    "sw": "Swahili",
    "ta": "Tamil",
    "te": "Telugu",
    "th": "Thai",
    "tl": "Tagalog",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "ur": "Urdu",
    "vi": "Vietnamese",
    "zh": "Chinese",
}


# Common UI languages to warm up first
WARM_UP_LANGUAGES: list[Language] = [
    Language.ES,
    Language.FR,
    Language.DE,
    Language.PT,
    Language.ZH,
    Language.JA,
    Language.KO,
    Language.IT,
]


SUPPORTED_LANGUAGES = list(Language)


class SameLanguagePolicy(str, Enum):
    """When a source and target tag count as the same language."""

    EXACT = "exact"                    # "en" == "EN", "en" != "en-US"
    PRIMARY_SUBTAG = "primary_subtag"  # "en" == "en-US" == "en_GB", "en" != "eng"


_SUBTAG_SEPARATOR = re.compile(r"[-_]")


# =============================================================================
# Utilities
# =============================================================================


def normalize_language_code(code: str) -> str:
    """Lower-case and trim a tag, and accept a few English language names."""
    code = code.lower().strip()

    variants = {
        "english": "en",
        "spanish": "es",
        "french": "fr",
        "german": "de",
        "chinese": "zh",
        "japanese": "ja",
        "korean": "ko",
        "portuguese": "pt",
        "italian": "it",
        "russian": "ru",
        "arabic": "ar",
        "hindi": "hi",
        "dutch": "nl",
        "polish": "pl",
        "ukrainian": "uk",
    }

    return variants.get(code, code)


def primary_subtag(tag: str) -> str:
    """Language part of a tag: pt-BR -> pt, zh_TW -> zh."""
    return _SUBTAG_SEPARATOR.split(normalize_language_code(tag), maxsplit=1)[0]


def get_language_name(code: str) -> str:
    """Get human-readable language name, falling back to the tag itself."""
    code = normalize_language_code(code)
    return LANGUAGE_NAMES.get(code) or LANGUAGE_NAMES.get(primary_subtag(code), code)


def get_language_by_code(code: str) -> Language | None:
    """Get Language enum by tag (region subtags ignored)."""
    try:
        return Language(primary_subtag(code))
    except ValueError:
        return None


def is_same_language(
    source: str,
    target: str,
    policy: SameLanguagePolicy | str = SameLanguagePolicy.EXACT,
) -> bool:
    """Whether translating source -> target would be a no-op."""
    policy = SameLanguagePolicy(policy)
    if policy is SameLanguagePolicy.PRIMARY_SUBTAG:
        return primary_subtag(source) == primary_subtag(target)
    return source.lower() == target.lower()
