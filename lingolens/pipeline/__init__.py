"""High-level pipeline orchestration for detect → OCR → translate."""

from .state import PipelineState, RunContext
from .controller import PipelineController
from .process import (
    print_progress,
    process_image_translate,
)

__all__ = [
    "PipelineState",
    "RunContext",
    "PipelineController",
    "print_progress",
    "process_image_translate",
]
