"""
Translation bridge: a single pass-through endpoint in front of the provider.

The bridge validates the request, turns ``sourceLang == "auto"`` into
"infer the source" and shapes errors. Provider errors are logged in full
and reported to the caller with a generic message only.
"""

import logging
from typing import Any, Optional, Protocol

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

from lingolens import __version__
from lingolens.config import Settings, load_settings

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Translation failed. Please try again."
AUTO_SOURCE = "auto"


class TranslationEngine(Protocol):
    def localize_text(self, text: str, source_locale: Optional[str], target_locale: str) -> str: ...


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(settings: Optional[Settings] = None, engine: Optional[TranslationEngine] = None) -> FastAPI:
    """Create the bridge application.

    Without an explicit ``engine`` the provider credential is required and
    its absence raises ``ConfigurationFailure`` before the app is built.
    """
    settings = settings or load_settings()
    if engine is None:
        from lingolens.llm import LlmTranslationEngine

        engine = LlmTranslationEngine.from_settings(settings)

    app = FastAPI(
        title="LingoLens Translation Bridge",
        description="Relays OCR text to the translation provider.",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    @app.post("/api/translate", tags=["Translation"])
    async def translate(request: Request) -> JSONResponse:
        try:
            body: Any = await request.json()
        except ValueError:
            return _error(400, "Request body must be a JSON object")
        if not isinstance(body, dict):
            return _error(400, "Request body must be a JSON object")

        text = body.get("text")
        source_lang = body.get("sourceLang")
        target_lang = body.get("targetLang")
        if not text or not isinstance(text, str):
            return _error(400, 'Missing or invalid "text" parameter')
        if not target_lang or not isinstance(target_lang, str):
            return _error(400, 'Missing or invalid "targetLang" parameter')

        source_locale = None if not source_lang or source_lang == AUTO_SOURCE else str(source_lang)
        logger.info("Processing: %s -> %s", source_locale or AUTO_SOURCE, target_lang)
        if source_locale is None:
            logger.info("Source language left to the provider to infer")

        try:
            translation = await run_in_threadpool(engine.localize_text, text, source_locale, target_lang)
        except Exception:
            logger.exception("Provider translation failed")
            return _error(500, GENERIC_ERROR)
        return JSONResponse(content={"translation": translation})

    return app
