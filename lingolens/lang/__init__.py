"""Language identifiers and the OCR → locale mapping."""

from .codes import (
    DEFAULT_LOCALE,
    DEFAULT_OCR_LANGUAGE,
    LOCALE_NAMES,
    Locale,
    OcrLanguage,
    locale_display_name,
    map_to_locale,
    normalize_and_validate_target_locale,
    ocr_language_for_script,
    parse_source_language,
)

__all__ = [
    "DEFAULT_LOCALE",
    "DEFAULT_OCR_LANGUAGE",
    "LOCALE_NAMES",
    "Locale",
    "OcrLanguage",
    "locale_display_name",
    "map_to_locale",
    "normalize_and_validate_target_locale",
    "ocr_language_for_script",
    "parse_source_language",
]
