"""Script detection used to pick an OCR language hint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from lingolens.errors import DetectionFailure
from lingolens.image import ImageResource
from lingolens.lang import OcrLanguage, ocr_language_for_script

from .engine import OSD_MODE, create_worker
from .scope import worker_scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionResult:
    script: str
    language: OcrLanguage


class ScriptDetector:
    def __init__(self, worker_factory: Callable[[str], Any] = create_worker) -> None:
        self._worker_factory = worker_factory

    async def detect(self, image: ImageResource) -> DetectionResult:
        """Classify the script in ``image`` and resolve it to an OCR hint.

        Doxygen:
        - @param image: Image handle borrowed for this call.
        - @return: Raw script label and resolved `OcrLanguage`.
        - @throws ImageError: If the image cannot be read (no worker is created).
        - @throws DetectionFailure: If the detection engine errors.
        """
        # Unreadable images fail here, before any worker exists
        image.to_rgb()
        try:
            async with worker_scope(self._worker_factory, OSD_MODE) as worker:
                raw = await worker.detect(image)
        except Exception as exc:
            raise DetectionFailure(detail=str(exc)) from exc

        script = str((raw or {}).get("script") or "unknown")
        language = ocr_language_for_script(script)
        logger.info("Detected script '%s' -> OCR language '%s'", script, language.value)
        return DetectionResult(script=script, language=language)
