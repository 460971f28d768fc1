"""OCR (Optical Character Recognition) layer.

This package wraps Tesseract workers behind a small engine contract and
provides the script detector and the text extractor used by the pipeline.
Every worker is acquired through ``worker_scope`` so that it is terminated
on every exit path.
"""

from .detector import DetectionResult, ScriptDetector
from .engine import (
    OSD_MODE,
    TesseractWorker,
    Worker,
    assemble_text,
    build_dataframe_from_tesseract,
    create_worker,
    group_words_to_lines,
)
from .extractor import ExtractionResult, TextExtractor
from .scope import ScopedResource, worker_scope

__all__ = [
    "DetectionResult",
    "ScriptDetector",
    "OSD_MODE",
    "TesseractWorker",
    "Worker",
    "assemble_text",
    "build_dataframe_from_tesseract",
    "create_worker",
    "group_words_to_lines",
    "ExtractionResult",
    "TextExtractor",
    "ScopedResource",
    "worker_scope",
]
