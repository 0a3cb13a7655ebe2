"""
Placeholder protection.

Natural-language translators happily "translate" format specifiers,
named tokens and markup. Before text goes to a translator every such
substring is swapped for an opaque token; afterwards the tokens are
swapped back.

Protected, in scan order:
1. printf-style specifiers: %s, %d, %1$s, %-5.2f, %%
2. Brace placeholders: {name}, {user_name}, {0}
3. Template expressions: ${name}, ${user.first}
4. Markup tags: <b>, </b>, <br/>, <a href="...">

Tokens look like ⟦PH0⟧. The ⟦ ⟧ pair (U+27E6 / U+27E7) cannot be
matched by any of the patterns above, so a later pattern never bites
into an earlier token. Text that already contains ⟦ is passed through
unmasked, which keeps unmask(mask(text)) == text for every input.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


TOKEN_OPEN = "⟦"
TOKEN_CLOSE = "⟧"
TOKEN_PREFIX = f"{TOKEN_OPEN}PH"

_TOKEN_RE = re.compile(re.escape(TOKEN_PREFIX) + r"(\d+)" + re.escape(TOKEN_CLOSE))


PLACEHOLDER_PATTERNS: list[re.Pattern[str]] = [
    # Format specifiers, optionally positional: %s, %1$s, %2$,d, %-5.2f, %%
    # No space flag, so prose like "50% off" is left alone; "% d" stays unmasked.
    # Precision digits are optional: %.f is %.0f
    re.compile(r"%(\d+\$)?[,+\-#0(]*\d*(?:\.\d*)?[diouxXeEfFgGaAcsStTbBhHnp%]"),
    # Named or numeric braces; ${...} is left to the template pattern
    re.compile(r"(?<!\$)\{(?:[a-zA-Z_][a-zA-Z0-9_]*|\d+)\}"),
    # Template expressions
    re.compile(r"\$\{[^}]+\}"),
    # Opening, closing and self-closing tags
    re.compile(r"</?[a-zA-Z][a-zA-Z0-9]*(?:\s+[^>]*)?/?>"),
]


@dataclass
class MaskResult:
    """Masked text plus the token -> original substring map needed to undo it."""

    masked_text: str
    placeholders: dict[str, str] = field(default_factory=dict)

    def missing_tokens(self, translated: str) -> list[str]:
        """Tokens a translator dropped from its output."""
        return [token for token in self.placeholders if token not in translated]


def make_token(index: int) -> str:
    return f"{TOKEN_PREFIX}{index}{TOKEN_CLOSE}"


def token_index(token: str) -> int:
    match = _TOKEN_RE.fullmatch(token)
    return int(match.group(1)) if match else 0


class PlaceholderMasker:
    """
    Masks placeholders before translation and restores them after.

    Callers use translate_with_protection(); mask/unmask stay internal so
    nobody can forget the second half.

    Usage:
        masker = PlaceholderMasker()
        result = await masker.translate_with_protection(
            "Hello %1$s, you have {count} new messages",
            lambda masked: translator.translate(masked, "en", "es"),
        )
    """

    def __init__(self, patterns: list[re.Pattern[str]] | None = None):
        self.patterns = patterns if patterns is not None else PLACEHOLDER_PATTERNS

    def _mask(self, text: str) -> MaskResult:
        if not text or TOKEN_OPEN in text:
            return MaskResult(text, {})

        masked = text
        placeholders: dict[str, str] = {}
        next_index = 0

        for pattern in self.patterns:
            matches = list(pattern.finditer(masked))
            # Right to left so earlier offsets stay valid
            for match in reversed(matches):
                start, end = match.span()
                original = match.group(0)
                token = make_token(next_index)
                next_index += 1
                placeholders[token] = original
                masked = masked[:start] + token + masked[end:]

        return MaskResult(masked, placeholders)

    def _unmask(self, masked_text: str, placeholders: dict[str, str]) -> str:
        result = masked_text
        # Highest index first so ⟦PH1⟧ never matches inside ⟦PH10⟧
        for token in sorted(placeholders, key=token_index, reverse=True):
            result = result.replace(token, placeholders[token])
        return result

    async def translate_with_protection(
        self,
        text: str,
        translate_fn: Callable[[str], Awaitable[str]],
    ) -> str:
        """Mask, translate the masked text, unmask."""
        masked = self._mask(text)
        translated = await translate_fn(masked.masked_text)

        missing = masked.missing_tokens(translated)
        if missing:
            # Soft degradation: the translator dropped placeholders
            logger.warning(
                f"Translator dropped {len(missing)} of {len(masked.placeholders)} "
                f"placeholder(s): {[masked.placeholders[t] for t in missing]}"
            )

        return self._unmask(translated, masked.placeholders)
