"""Text extraction with a single scoped OCR worker per call."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from lingolens.errors import ExtractionFailure, PipelineError
from lingolens.image import ImageResource
from lingolens.lang import OcrLanguage

from .engine import create_worker
from .scope import worker_scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    language: OcrLanguage
    confidence: Optional[float] = None


class TextExtractor:
    def __init__(self, worker_factory: Callable[[str], Any] = create_worker) -> None:
        self._worker_factory = worker_factory

    async def extract(self, image: ImageResource, language_hint: OcrLanguage) -> ExtractionResult:
        """Recognize the text in ``image`` using ``language_hint``.

        The returned text keeps the engine's whitespace; only the emptiness
        check looks at the stripped text.

        Doxygen:
        - @param image: Image handle borrowed for this call.
        - @param language_hint: Concrete OCR language (never `auto`).
        - @return: `ExtractionResult` with non-blank text.
        - @throws ExtractionFailure: On blank text or any engine/image error.
        """
        try:
            async with worker_scope(self._worker_factory, language_hint.value) as worker:
                raw = await worker.recognize(image)
        except PipelineError as exc:
            raise ExtractionFailure(exc.user_message, detail=exc.detail) from exc
        except Exception as exc:
            raise ExtractionFailure("Text recognition failed.", detail=str(exc)) from exc

        raw = raw or {}
        text = raw.get("text")
        if not isinstance(text, str) or not text.strip():
            raise ExtractionFailure()
        confidence = raw.get("confidence")
        logger.info(
            "Extracted %d characters with '%s'%s",
            len(text),
            language_hint.value,
            f" (confidence {confidence:.1f})" if isinstance(confidence, (int, float)) else "",
        )
        return ExtractionResult(
            text=text,
            language=language_hint,
            confidence=float(confidence) if isinstance(confidence, (int, float)) else None,
        )
