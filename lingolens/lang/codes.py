"""OCR language identifiers, translation locales and the mapping between them.

Tesseract speaks in three-letter traineddata names (``eng``, ``jpn``,
``chi_sim``) while the translation bridge expects two-letter locale codes.
Both sides are closed enumerations; adding a language means one new member
in each enum plus one row in ``_OCR_TO_LOCALE``.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Union


class OcrLanguage(str, Enum):
    AUTO = "auto"
    ENGLISH = "eng"
    JAPANESE = "jpn"
    CHINESE_SIMPLIFIED = "chi_sim"
    FRENCH = "fra"
    SPANISH = "spa"
    HINDI = "hin"


class Locale(str, Enum):
    AUTO = "auto"
    EN = "en"
    JA = "ja"
    ZH = "zh"
    FR = "fr"
    ES = "es"
    HI = "hi"


# Hint used whenever the script is unknown ("plain text / Latin")
DEFAULT_OCR_LANGUAGE = OcrLanguage.ENGLISH
DEFAULT_LOCALE = Locale.EN

_OCR_TO_LOCALE: Dict[OcrLanguage, Locale] = {
    OcrLanguage.AUTO: Locale.AUTO,
    OcrLanguage.ENGLISH: Locale.EN,
    OcrLanguage.JAPANESE: Locale.JA,
    OcrLanguage.CHINESE_SIMPLIFIED: Locale.ZH,
    OcrLanguage.FRENCH: Locale.FR,
    OcrLanguage.SPANISH: Locale.ES,
    OcrLanguage.HINDI: Locale.HI,
}

# Tesseract OSD script names -> OCR language hint
_SCRIPT_TO_OCR: Dict[str, OcrLanguage] = {
    "latin": OcrLanguage.ENGLISH,
    "japanese": OcrLanguage.JAPANESE,
    "katakana": OcrLanguage.JAPANESE,
    "hiragana": OcrLanguage.JAPANESE,
    "han": OcrLanguage.CHINESE_SIMPLIFIED,
    "hans": OcrLanguage.CHINESE_SIMPLIFIED,
    "hant": OcrLanguage.CHINESE_SIMPLIFIED,
    "devanagari": OcrLanguage.HINDI,
}

# English names used in provider prompts
LOCALE_NAMES: Dict[Locale, str] = {
    Locale.EN: "English",
    Locale.JA: "Japanese",
    Locale.ZH: "Chinese (Simplified)",
    Locale.FR: "French",
    Locale.ES: "Spanish",
    Locale.HI: "Hindi",
}


def _code_value(code: object) -> str:
    return str(getattr(code, "value", code) or "").strip().lower()


def map_to_locale(code: Union[OcrLanguage, str, None]) -> Locale:
    """Translate an OCR identifier into the locale the translation service accepts.

    Total over any input: ``auto`` passes through as ``Locale.AUTO`` and
    anything outside the table resolves to ``DEFAULT_LOCALE``.
    """
    if isinstance(code, OcrLanguage):
        return _OCR_TO_LOCALE[code]
    norm = _code_value(code)
    try:
        return _OCR_TO_LOCALE[OcrLanguage(norm)]
    except ValueError:
        return DEFAULT_LOCALE


def ocr_language_for_script(label: str | None) -> OcrLanguage:
    """Resolve a detection engine script label to an OCR language hint."""
    if not label:
        return DEFAULT_OCR_LANGUAGE
    return _SCRIPT_TO_OCR.get(str(label).strip().lower(), DEFAULT_OCR_LANGUAGE)


def locale_display_name(locale: Union[Locale, str, None]) -> str | None:
    if not locale:
        return None
    try:
        return LOCALE_NAMES.get(Locale(_code_value(locale)))
    except ValueError:
        return None


def parse_source_language(value: Union[OcrLanguage, str, None]) -> OcrLanguage:
    if isinstance(value, OcrLanguage):
        return value
    norm = _code_value(value)
    if not norm:
        return OcrLanguage.AUTO
    try:
        return OcrLanguage(norm)
    except ValueError:
        allowed = ", ".join(m.value for m in OcrLanguage)
        raise ValueError(
            f"Unsupported source language: '{value}'. Allowed values: {allowed}."
        ) from None


def normalize_and_validate_target_locale(value: Union[Locale, str, None]) -> Locale:
    if isinstance(value, Locale) and value is not Locale.AUTO:
        return value
    norm = _code_value(value)
    if not norm:
        raise ValueError("Target language must be provided as a locale code, e.g. 'es', 'fr', 'ja'.")
    try:
        locale = Locale(norm)
    except ValueError:
        locale = None
    if locale is None or locale is Locale.AUTO:
        allowed = ", ".join(m.value for m in Locale if m is not Locale.AUTO)
        raise ValueError(
            f"Unsupported target language: '{value}'. Allowed values: {allowed}."
        )
    return locale


__all__ = [
    "OcrLanguage",
    "Locale",
    "DEFAULT_OCR_LANGUAGE",
    "DEFAULT_LOCALE",
    "LOCALE_NAMES",
    "map_to_locale",
    "ocr_language_for_script",
    "locale_display_name",
    "parse_source_language",
    "normalize_and_validate_target_locale",
]
