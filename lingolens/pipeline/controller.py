"""Pipeline controller: detection → extraction → translation for one image.

The controller owns phase ordering, failure isolation between phases and
the image slot. The last submitted handle stays in the slot after its run
so the next submit can revoke it before binding a new one; ``close()``
releases it explicitly. Progress is published as immutable
``RunContext`` snapshots to subscribed listeners; listeners only observe and
have no bearing on the run.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Union

from lingolens.errors import DetectionFailure, PipelineBusy, PipelineError, TranslationFailure
from lingolens.image import ImageResource, ImageSlot
from lingolens.lang import (
    DEFAULT_OCR_LANGUAGE,
    Locale,
    OcrLanguage,
    map_to_locale,
    normalize_and_validate_target_locale,
    parse_source_language,
)
from lingolens.ocr import ScriptDetector, TextExtractor
from lingolens.translation import TranslationClient

from .state import PipelineState, RunContext

logger = logging.getLogger(__name__)

Listener = Callable[[RunContext], None]


class PipelineController:
    def __init__(
        self,
        detector: Optional[ScriptDetector] = None,
        extractor: Optional[TextExtractor] = None,
        translator: Optional[TranslationClient] = None,
    ) -> None:
        self._detector = detector or ScriptDetector()
        self._extractor = extractor or TextExtractor()
        self._translator = translator or TranslationClient()
        self._listeners: List[Listener] = []
        self._slot = ImageSlot()
        self._context: Optional[RunContext] = None
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def context(self) -> Optional[RunContext]:
        """Latest snapshot of the current (or last finished) run."""
        return self._context

    @property
    def image(self) -> Optional[ImageResource]:
        return self._slot.current

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Release the image still held from the last run."""
        if self._busy:
            raise PipelineBusy("Cannot close the controller while a run is in progress.")
        self._slot.clear()

    async def submit(
        self,
        image: ImageResource,
        source: Union[OcrLanguage, str] = OcrLanguage.AUTO,
        target: Union[Locale, str] = Locale.ES,
    ) -> RunContext:
        """Run the full pipeline for ``image`` and return the terminal context.

        Doxygen:
        - @param image: Handle for this run; a different handle left over from the previous run is released first.
        - @param source: OCR language or 'auto' to detect the script first.
        - @param target: Target locale code.
        - @return: `RunContext` in `Done` or `Failed`.
        - @throws PipelineBusy: If another run is still active.
        - @throws ValueError: If `source` or `target` is not a supported code.
        """
        if self._busy:
            raise PipelineBusy("A run is already in progress; wait for it to finish before submitting again.")
        source_language = parse_source_language(source)
        target_locale = normalize_and_validate_target_locale(target)

        self._busy = True
        try:
            self._slot.replace(image)
            ctx = RunContext(source=source_language, target=target_locale)
            self._publish(ctx)
            return await self._run(ctx, image)
        finally:
            self._busy = False

    async def _run(self, ctx: RunContext, image: ImageResource) -> RunContext:
        hint = ctx.source
        source_locale: Optional[Locale] = None
        detected_script: Optional[str] = None

        if ctx.source is OcrLanguage.AUTO:
            ctx = self._step(ctx, PipelineState.DETECTING_SCRIPT)
            try:
                detection = await self._detector.detect(image)
            except DetectionFailure as exc:
                # Best-effort hint: OCR with the default language, let the provider infer the source
                logger.warning(
                    "Run %s: script detection failed, using '%s': %s",
                    ctx.run_id, DEFAULT_OCR_LANGUAGE.value, exc,
                )
                hint = DEFAULT_OCR_LANGUAGE
                source_locale = Locale.AUTO
            except PipelineError as exc:
                return self._fail(ctx, exc)
            else:
                hint = detection.language
                detected_script = detection.script

        ctx = self._step(ctx, PipelineState.EXTRACTING, ocr_language=hint, detected_script=detected_script)
        try:
            extraction = await self._extractor.extract(image, hint)
        except PipelineError as exc:
            return self._fail(ctx, exc)

        if source_locale is None:
            source_locale = map_to_locale(hint)
        ctx = self._step(
            ctx,
            PipelineState.TRANSLATING,
            extracted_text=extraction.text,
            source_locale=source_locale,
        )
        try:
            translation = await self._translator.translate(extraction.text, source_locale, ctx.target)
        except PipelineError as exc:
            return self._fail(ctx, exc)
        except Exception as exc:
            logger.exception("Run %s: translator raised an unexpected error", ctx.run_id)
            return self._fail(ctx, TranslationFailure(detail=str(exc)))

        return self._step(ctx, PipelineState.DONE, translated_text=translation)

    def _step(self, ctx: RunContext, state: PipelineState, **changes) -> RunContext:
        ctx = ctx.advance(state, **changes)
        self._publish(ctx)
        return ctx

    def _fail(self, ctx: RunContext, error: PipelineError) -> RunContext:
        ctx = ctx.fail(error)
        logger.error("Run %s: %s", ctx.run_id, error)
        self._publish(ctx)
        return ctx

    def _publish(self, ctx: RunContext) -> None:
        self._context = ctx
        logger.info("Run %s: %s", ctx.run_id, ctx.state.value)
        for listener in list(self._listeners):
            try:
                listener(ctx)
            except Exception:
                logger.exception("Progress listener raised; ignoring")


__all__ = [
    "PipelineController",
]
