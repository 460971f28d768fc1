"""High-level entry point: image file → extracted text → translation.

Wraps ``PipelineController`` for scripts and the CLI, printing phase
progress to the terminal.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from lingolens.image import ImageResource
from lingolens.translation import TranslationClient

from .controller import PipelineController
from .state import PipelineState, RunContext

_PHASE_ORDER = [
    PipelineState.DETECTING_SCRIPT,
    PipelineState.EXTRACTING,
    PipelineState.TRANSLATING,
    PipelineState.DONE,
]


def print_progress(ctx: RunContext, width: int = 4) -> None:
    """Render a colored one-line phase bar followed by the progress message.

    Doxygen:
    - @param ctx: Snapshot published by the controller.
    - @param width: Number of bar segments (one per phase).
    """
    if ctx.state is PipelineState.IDLE:
        return
    GREEN = "\x1b[32m"
    RED = "\x1b[31m"
    RESET = "\x1b[0m"
    if ctx.state is PipelineState.FAILED:
        phase = ctx.failed_phase or PipelineState.DETECTING_SCRIPT
        filled = _PHASE_ORDER.index(phase) if phase in _PHASE_ORDER else 0
        bar = f"{GREEN}{'█' * filled}{RESET}{RED}{'█' * (width - filled)}{RESET}"
    else:
        filled = _PHASE_ORDER.index(ctx.state) + 1
        bar = f"{GREEN}{'█' * filled}{RESET}{'░' * (width - filled)}"
    end = "\n" if ctx.state.terminal else ""
    print(f"\r{bar} {ctx.message:<60}", end=end, flush=True)


def process_image_translate(
    image_path: str,
    source: str = "auto",
    target: str = "es",
    bridge_url: str = "http://localhost:3001",
    request_timeout: Optional[float] = 60.0,
    controller: Optional[PipelineController] = None,
    show_progress: bool = True,
) -> RunContext:
    """Run detection/extraction/translation for one image file.

    Doxygen:
    - @param image_path: Path to input image file.
    - @param source: OCR language code or 'auto'.
    - @param target: Target locale code.
    - @param bridge_url: Base URL of the translation bridge.
    - @param request_timeout: Timeout for the bridge request; None disables it.
    - @param controller: Pre-built controller (tests, custom engines).
    - @param show_progress: Print a phase bar while running.
    - @return: Terminal `RunContext` (Done or Failed).
    """
    controller = controller or PipelineController(
        translator=TranslationClient(bridge_url, timeout=request_timeout),
    )
    unsubscribe = controller.subscribe(print_progress) if show_progress else None
    try:
        with ImageResource.from_path(image_path) as image:
            return asyncio.run(controller.submit(image, source=source, target=target))
    finally:
        if unsubscribe is not None:
            unsubscribe()
