"""LLM (Large Language Model) integration package.

This package provides utilities to reach the translation provider via
OpenRouter-compatible clients and the prompt-based translation engine the
bridge delegates to.
"""

from .client import (
    DEFAULT_BASE_URL,
    create_provider_client,
    complete_prompt,
)
from .translate import (
    LlmTranslationEngine,
    extract_translation,
    translate_text,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "create_provider_client",
    "complete_prompt",
    "LlmTranslationEngine",
    "extract_translation",
    "translate_text",
]
