"""
Current target language.

Holds the language the application is displayed in and tells observers
when it changes. Persisting the choice is up to the application.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Callable, Iterable

from linguacache.core.state import StateStream
from linguacache.i18n.languages import normalize_language_code, primary_subtag

logger = logging.getLogger(__name__)


class LanguageSelector:
    """
    Current language plus change notifications.

    Usage:
        selector = LanguageSelector("en", supported=["en", "es", "fr"])
        selector.subscribe(lambda tag: print(f"now {tag}"))
        selector.set_language("es")
    """

    def __init__(self, initial: str = "en", supported: Iterable[str] | None = None):
        self.supported = [normalize_language_code(tag) for tag in supported] if supported else []
        self._state: StateStream[str] = StateStream(normalize_language_code(initial))

    @property
    def current(self) -> str:
        return self._state.value

    def is_supported(self, tag: str) -> bool:
        """Empty supported list means anything goes. Region variants of a supported language are accepted."""
        if not self.supported:
            return True
        tag = normalize_language_code(tag)
        return tag in self.supported or primary_subtag(tag) in self.supported

    def set_language(self, tag: str) -> None:
        """
        Switch the current language.

        Raises:
            ValueError: tag is not among the supported languages
        """
        if not self.is_supported(tag):
            raise ValueError(f"Unsupported language: {tag} (supported: {', '.join(self.supported)})")
        tag = normalize_language_code(tag)
        if tag != self.current:
            logger.info(f"Language set to: {tag}")
        self._state.set(tag)

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        """Call listener on every change; returns an unsubscribe function."""
        return self._state.subscribe(listener)

    def watch(self) -> AsyncIterator[str]:
        """Current language, then each change."""
        return self._state.watch()
