"""Tesseract-backed engine workers.

A worker is created for one language (or for OSD script detection), used
for a single call and terminated. The blocking pytesseract calls run in a
thread so that the pipeline's event loop stays responsive.

This module provides:
- The ``Worker`` protocol consumed by the detector and the extractor.
- ``TesseractWorker`` and the ``create_worker`` factory.
- Building a cleaned DataFrame from pytesseract output and reassembling
  the recognized words into lines and paragraphs.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Dict, FrozenSet, List, Optional, Protocol, Union

import pandas as pd
import pytesseract

from lingolens.image import ImageResource
from lingolens.lang import OcrLanguage

logger = logging.getLogger(__name__)

# Worker mode for orientation and script detection
OSD_MODE = "osd"


class Worker(Protocol):
    async def detect(self, image: ImageResource) -> Dict[str, Any]: ...

    async def recognize(self, image: ImageResource) -> Dict[str, Any]: ...

    def terminate(self) -> None: ...


def build_dataframe_from_tesseract(data: Dict[str, Any]) -> pd.DataFrame:
    """Create and clean a DataFrame from pytesseract.image_to_data output.

    Doxygen:
    - @param data: Dict returned by `pytesseract.image_to_data(..., output_type=Output.DICT)`.
    - @return: DataFrame with only confident, non-empty words.
    """
    df = pd.DataFrame(data)
    if df.empty or "text" not in df.columns:
        return pd.DataFrame(columns=["block_num", "par_num", "line_num", "left", "conf", "text"])
    df["conf"] = pd.to_numeric(df["conf"], errors="coerce").fillna(-1)
    df = df[df["conf"] > 0].copy()
    df["text"] = df["text"].fillna("").astype(str).str.strip()
    df = df[df["text"] != ""]
    return df


def group_words_to_lines(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Group OCR words into lines in reading order.

    Doxygen:
    - @param df: DataFrame produced by `build_dataframe_from_tesseract`.
    - @return: Line dicts with text, block/paragraph numbers and mean confidence.
    """
    if df.empty:
        return []
    lines: List[Dict[str, Any]] = []
    for (block, par, line), g in df.groupby(["block_num", "par_num", "line_num"], sort=True):
        g_sorted = g.sort_values("left")
        lines.append({
            "text": " ".join(g_sorted["text"].tolist()),
            "block_num": int(block),
            "par_num": int(par),
            "line_num": int(line),
            "confidence": float(g_sorted["conf"].mean()),
        })
    return lines


def assemble_text(lines: List[Dict[str, Any]]) -> str:
    """Join lines with newlines and separate paragraphs by a blank line."""
    paragraphs: List[List[str]] = []
    current_key = None
    for ln in lines:
        key = (ln["block_num"], ln["par_num"])
        if key != current_key:
            paragraphs.append([])
            current_key = key
        paragraphs[-1].append(ln["text"])
    return "\n\n".join("\n".join(p) for p in paragraphs)


class TesseractWorker:
    """Single-use worker bound to one Tesseract language or to OSD mode."""

    def __init__(self, language: str) -> None:
        self.language = language
        self.terminated = False

    def _ensure_alive(self) -> None:
        if self.terminated:
            raise RuntimeError(f"Tesseract worker for '{self.language}' has been terminated")

    async def detect(self, image: ImageResource) -> Dict[str, Any]:
        self._ensure_alive()
        if self.language != OSD_MODE:
            raise RuntimeError("Script detection requires a worker created in OSD mode")
        rgb = image.to_rgb()
        osd = await asyncio.to_thread(
            pytesseract.image_to_osd, rgb, output_type=pytesseract.Output.DICT
        )
        return {"script": str(osd.get("script", "")), "confidence": osd.get("script_conf")}

    async def recognize(self, image: ImageResource) -> Dict[str, Any]:
        self._ensure_alive()
        if self.language == OSD_MODE:
            raise RuntimeError("Text recognition requires a worker created for a language")
        rgb = image.to_rgb()
        data = await asyncio.to_thread(
            pytesseract.image_to_data, rgb, lang=self.language, output_type=pytesseract.Output.DICT
        )
        df = build_dataframe_from_tesseract(data)
        confidence: Optional[float] = float(df["conf"].mean()) if not df.empty else None
        return {"text": assemble_text(group_words_to_lines(df)), "confidence": confidence}

    def terminate(self) -> None:
        self.terminated = True


@functools.lru_cache(maxsize=1)
def installed_languages() -> FrozenSet[str]:
    return frozenset(pytesseract.get_languages(config=""))


def create_worker(language: Union[OcrLanguage, str]) -> TesseractWorker:
    """Create a worker for an OCR language or for ``OSD_MODE``.

    Doxygen:
    - @param language: OCR language identifier (e.g. 'jpn') or 'osd'.
    - @return: A fresh `TesseractWorker`.
    - @throws RuntimeError: If Tesseract lacks data for the requested language.
    """
    lang = language.value if isinstance(language, OcrLanguage) else str(language)
    if lang == OcrLanguage.AUTO.value:
        raise RuntimeError("'auto' is not a Tesseract language; resolve it before creating a worker")
    if lang not in installed_languages():
        raise RuntimeError(f"Tesseract language data not installed: '{lang}'")
    logger.debug("Creating Tesseract worker for '%s'", lang)
    return TesseractWorker(lang)


__all__ = [
    "OSD_MODE",
    "Worker",
    "TesseractWorker",
    "build_dataframe_from_tesseract",
    "group_words_to_lines",
    "assemble_text",
    "installed_languages",
    "create_worker",
]
