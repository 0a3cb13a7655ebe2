"""
Translation error taxonomy.

Every failure a backing translator can report is a TranslationError.
Callers that only care about "did it work" catch the base class; the
subclasses tell them whether retrying or preparing can help.
"""

from __future__ import annotations


class TranslationError(Exception):
    """Raised when a translator cannot produce output."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class UnsupportedLanguageError(TranslationError):
    """The translator cannot map a language tag to anything it understands."""

    def __init__(self, language_tag: str, message: str | None = None, cause: BaseException | None = None):
        super().__init__(message or f"Unsupported language: {language_tag}", cause)
        self.language_tag = language_tag


class ModelNotAvailableError(TranslationError):
    """The translator is not prepared for the requested language. Fix with prepare()."""

    def __init__(self, language_tag: str, message: str | None = None, cause: BaseException | None = None):
        super().__init__(message or f"Language model not available for: {language_tag}", cause)
        self.language_tag = language_tag


class TransientTranslationError(TranslationError):
    """Network or runtime failure during a translate call."""
    pass


class ModelDownloadError(TranslationError):
    """Warm-up failed while downloading a language model."""

    def __init__(self, language_tag: str, message: str | None = None, cause: BaseException | None = None):
        super().__init__(message or f"Failed to download language model for: {language_tag}", cause)
        self.language_tag = language_tag
