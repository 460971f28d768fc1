"""Client side of the translation bridge."""

from .client import DEFAULT_BRIDGE_URL, GENERIC_ERROR, TranslationClient

__all__ = [
    "DEFAULT_BRIDGE_URL",
    "GENERIC_ERROR",
    "TranslationClient",
]
