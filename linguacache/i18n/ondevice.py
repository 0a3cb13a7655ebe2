"""
Base class for on-device translators.

On-device engines need a language model per language before they can
translate. This base handles the bookkeeping around that: mapping tags
to supported languages, readiness checks against the model registry,
and idempotent downloads with progress reporting. Subclasses plug in
the engine itself.
"""

from __future__ import annotations

import asyncio
import logging
from abc import abstractmethod
from typing import Callable, Iterable

from linguacache.core.errors import (
    ModelDownloadError,
    ModelNotAvailableError,
    TransientTranslationError,
    TranslationError,
    UnsupportedLanguageError,
)
from linguacache.core.models import (
    READY,
    Downloading,
    DownloadPhase,
    DownloadState,
    Failed,
    PrepareResult,
    TranslationContext,
)
from linguacache.core.state import StateStream
from linguacache.i18n.languages import LANGUAGE_NAMES, primary_subtag
from linguacache.i18n.translator import Translator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class OnDeviceTranslator(Translator):
    """
    Translator backed by locally downloaded language models.

    Subclasses implement:
        _translate_text(text, source, target)   -> translated text
        _is_model_downloaded(language)          -> bool
        _download_model(language, on_progress)  -> None, raises on failure
        _delete_model(language)                 -> bool
        _list_downloaded_models()               -> list of language codes

    Languages are reduced to their primary subtag ("pt-BR" -> "pt").

    prepare() is idempotent: concurrent calls that need the same model
    share one download, and a caller that gives up waiting (cancellation)
    does not stop it. Progress is published on `download_state`.

    With wait_for_download=False, prepare() starts missing downloads and
    returns Downloading(progress) straight away; poll again for the
    terminal result.
    """

    def __init__(
        self,
        supported_languages: Iterable[str] | None = None,
        wait_for_download: bool = True,
    ):
        languages = supported_languages if supported_languages is not None else LANGUAGE_NAMES
        self.supported_languages: set[str] = {primary_subtag(lang) for lang in languages}
        self.wait_for_download = wait_for_download
        self.download_state: StateStream[DownloadState] = StateStream(DownloadState.idle())
        self._downloads: dict[str, asyncio.Task[None]] = {}
        self._closed = False

    # =========================================================================
    # Engine hooks
    # =========================================================================

    @abstractmethod
    async def _translate_text(self, text: str, source: str, target: str) -> str:
        pass

    @abstractmethod
    async def _is_model_downloaded(self, language: str) -> bool:
        pass

    @abstractmethod
    async def _download_model(self, language: str, on_progress: ProgressCallback) -> None:
        pass

    async def _delete_model(self, language: str) -> bool:
        return False

    async def _list_downloaded_models(self) -> list[str]:
        return []

    def _release(self) -> None:
        """Free engine resources on close()."""
        pass

    # =========================================================================
    # Translator contract
    # =========================================================================

    def is_language_supported(self, language_tag: str) -> bool:
        return primary_subtag(language_tag) in self.supported_languages

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        context: TranslationContext = TranslationContext.UI,
    ) -> str:
        if not text or not text.strip():
            return text

        source = self._resolve(source_lang)
        target = self._resolve(target_lang)
        if source == target:
            return text

        for language, tag in ((source, source_lang), (target, target_lang)):
            if not await self._is_model_downloaded(language):
                raise ModelNotAvailableError(tag)

        try:
            return await self._translate_text(text, source, target)
        except TranslationError:
            raise
        except Exception as e:
            raise TransientTranslationError(f"Translation failed: {e}", e) from e

    async def is_ready(self, source_lang: str, target_lang: str) -> bool:
        if not (self.is_language_supported(source_lang) and self.is_language_supported(target_lang)):
            return False

        for language in {primary_subtag(source_lang), primary_subtag(target_lang)}:
            try:
                if not await self._is_model_downloaded(language):
                    return False
            except Exception as e:
                logger.warning(f"Model registry check failed for {language}: {e}")
                return False
        return True

    async def prepare(self, source_lang: str, target_lang: str) -> PrepareResult:
        try:
            source = self._resolve(source_lang)
            target = self._resolve(target_lang)
        except UnsupportedLanguageError as e:
            return Failed(e)

        try:
            missing = [
                language
                for language in dict.fromkeys((source, target))
                if not await self._is_model_downloaded(language)
            ]
        except Exception as e:
            return Failed(TranslationError(f"Preparation failed: {e}", e))

        if not missing:
            return READY

        tasks = [self._ensure_download(language) for language in missing]

        if not self.wait_for_download:
            return Downloading(self._current_progress())

        # Shielded: a caller that stops waiting leaves the downloads running
        results = await asyncio.shield(asyncio.gather(*tasks, return_exceptions=True))

        for language, result in zip(missing, results):
            if isinstance(result, TranslationError):
                return Failed(result)
            if isinstance(result, BaseException):
                return Failed(ModelDownloadError(language, cause=result))

        return READY

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for task in self._downloads.values():
            task.cancel()
        self._downloads.clear()
        self._release()

    # =========================================================================
    # Model management
    # =========================================================================

    async def delete_model(self, language_tag: str) -> bool:
        if not self.is_language_supported(language_tag):
            return False
        try:
            return await self._delete_model(primary_subtag(language_tag))
        except Exception as e:
            logger.warning(f"Failed to delete model for {language_tag}: {e}")
            return False

    async def downloaded_models(self) -> list[str]:
        try:
            return await self._list_downloaded_models()
        except Exception as e:
            logger.warning(f"Failed to list downloaded models: {e}")
            return []

    # =========================================================================
    # Internals
    # =========================================================================

    def _resolve(self, language_tag: str) -> str:
        language = primary_subtag(language_tag)
        if language not in self.supported_languages:
            raise UnsupportedLanguageError(language_tag)
        return language

    def _current_progress(self) -> float:
        state = self.download_state.value
        return state.progress if state.phase is DownloadPhase.DOWNLOADING else 0.0

    def _ensure_download(self, language: str) -> asyncio.Task[None]:
        task = self._downloads.get(language)
        if task is None:
            task = asyncio.create_task(self._download(language))
            task.add_done_callback(_retrieve_result)
            self._downloads[language] = task
        return task

    async def _download(self, language: str) -> None:
        logger.info(f"Downloading language model: {language}")
        self.download_state.set(DownloadState.downloading(0.0, language))

        def on_progress(progress: float) -> None:
            progress = min(max(progress, 0.0), 1.0)
            self.download_state.set(DownloadState.downloading(progress, language))

        try:
            await self._download_model(language, on_progress)
        except asyncio.CancelledError:
            self.download_state.set(DownloadState.idle())
            raise
        except Exception as e:
            error = ModelDownloadError(language, cause=e)
            self.download_state.set(DownloadState.failed(error, language))
            logger.warning(f"Language model download failed for {language}: {e}")
            raise error from e
        finally:
            self._downloads.pop(language, None)

        self.download_state.set(DownloadState.complete(language))
        logger.info(f"Language model ready: {language}")


def _retrieve_result(task: asyncio.Task[None]) -> None:
    # Failures are already published on download_state; nobody may await
    # the task when prepare() does not wait.
    if not task.cancelled():
        task.exception()
