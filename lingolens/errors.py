"""Error taxonomy for the image → text → translation pipeline.

Every run-level failure is a ``PipelineError`` carrying the phase it belongs
to and a short message that can be shown to the user as-is. ``phase`` holds
the value of the matching ``PipelineState`` member, which is a ``str`` enum,
so ``err.phase == PipelineState.EXTRACTING`` works without importing the
state module here.
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    phase: Optional[str] = None
    default_message = "Processing failed."

    def __init__(self, user_message: Optional[str] = None, *, detail: Optional[str] = None) -> None:
        self.user_message = user_message or self.default_message
        self.detail = detail
        super().__init__(self.user_message if not detail else f"{self.user_message} ({detail})")

    def describe(self, phase: Optional[str] = None) -> str:
        """Human-readable message naming the failed phase.

        ``phase`` overrides the class phase, for errors such as ``ImageError``
        that can surface in more than one phase.
        """
        label = _PHASE_LABELS.get(phase or self.phase or "", "Processing")
        return f"{label} failed: {self.user_message}"


class DetectionFailure(PipelineError):
    phase = "detecting_script"
    default_message = "Could not detect the script in the image."


class ExtractionFailure(PipelineError):
    phase = "extracting"
    default_message = "No text found in the image."


class TranslationFailure(PipelineError):
    phase = "translating"
    default_message = "Server failed to translate."


class ImageError(PipelineError):
    default_message = "The image could not be read."


class ConfigurationFailure(PipelineError):
    default_message = "Translation service credential is not configured."


class PipelineBusy(RuntimeError):
    """Raised when a run is submitted while another one is still active."""


class InvalidTransition(RuntimeError):
    pass


_PHASE_LABELS = {
    "detecting_script": "Script detection",
    "extracting": "Text extraction",
    "translating": "Translation",
}


__all__ = [
    "PipelineError",
    "DetectionFailure",
    "ExtractionFailure",
    "TranslationFailure",
    "ImageError",
    "ConfigurationFailure",
    "PipelineBusy",
    "InvalidTransition",
]
