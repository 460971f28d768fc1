"""Run phases and the immutable per-step run context."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Optional

from lingolens.errors import InvalidTransition
from lingolens.lang import Locale, OcrLanguage

if TYPE_CHECKING:
    from lingolens.errors import PipelineError


class PipelineState(str, Enum):
    IDLE = "idle"
    DETECTING_SCRIPT = "detecting_script"
    EXTRACTING = "extracting"
    TRANSLATING = "translating"
    DONE = "done"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (PipelineState.DONE, PipelineState.FAILED)


_TRANSITIONS: Dict[PipelineState, FrozenSet[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.DETECTING_SCRIPT, PipelineState.EXTRACTING}),
    PipelineState.DETECTING_SCRIPT: frozenset({PipelineState.EXTRACTING, PipelineState.FAILED}),
    PipelineState.EXTRACTING: frozenset({PipelineState.TRANSLATING, PipelineState.FAILED}),
    PipelineState.TRANSLATING: frozenset({PipelineState.DONE, PipelineState.FAILED}),
    PipelineState.DONE: frozenset(),
    PipelineState.FAILED: frozenset(),
}

_PROGRESS_MESSAGES: Dict[PipelineState, str] = {
    PipelineState.IDLE: "Ready",
    PipelineState.DETECTING_SCRIPT: "Detecting script...",
    PipelineState.EXTRACTING: "Scanning image...",
    PipelineState.TRANSLATING: "Translating...",
    PipelineState.DONE: "Done!",
    PipelineState.FAILED: "Error occurred",
}


@dataclass(frozen=True)
class RunContext:
    """Snapshot of one run. Every transition produces a new instance."""

    source: OcrLanguage
    target: Locale
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    state: PipelineState = PipelineState.IDLE
    message: str = _PROGRESS_MESSAGES[PipelineState.IDLE]
    detected_script: Optional[str] = None
    ocr_language: Optional[OcrLanguage] = None
    source_locale: Optional[Locale] = None
    extracted_text: Optional[str] = None
    translated_text: Optional[str] = None
    error: Optional["PipelineError"] = None
    failed_phase: Optional[PipelineState] = None

    def advance(self, state: PipelineState, **changes: Any) -> "RunContext":
        """Return a copy moved to ``state`` with ``changes`` applied.

        Doxygen:
        - @param state: Next phase; must be reachable from the current one.
        - @param changes: Other fields to update on the new snapshot.
        - @return: New `RunContext`.
        - @throws InvalidTransition: If the transition is not allowed.
        """
        if state not in _TRANSITIONS[self.state]:
            raise InvalidTransition(f"Cannot move run {self.run_id} from {self.state.value} to {state.value}")
        changes.setdefault("message", _PROGRESS_MESSAGES[state])
        return replace(self, state=state, **changes)

    def fail(self, error: "PipelineError") -> "RunContext":
        # Only error fields change: text produced by earlier phases stays
        return self.advance(
            PipelineState.FAILED,
            error=error,
            failed_phase=self.state,
            message=error.describe(self.state.value),
        )

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return self.error.describe(self.failed_phase.value if self.failed_phase else None)


__all__ = [
    "PipelineState",
    "RunContext",
]
