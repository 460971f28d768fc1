"""Prompt-based text translation through the provider.

Includes prompt loading, JSON parsing of the model's answer and the
``LlmTranslationEngine`` used by the bridge. Unlike the OCR pipeline this
layer raises on every failure; the bridge decides what the caller sees.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, Optional

from openai import OpenAI

from lingolens.config import PROJECT_ROOT, Settings
from lingolens.lang import locale_display_name

from .client import complete_prompt, create_provider_client

logger = logging.getLogger(__name__)

PROMPTS_PATH = os.path.join(PROJECT_ROOT, "config", "prompts.json")

_DEFAULT_PROMPTS = {
    "translate": (
        "You are a professional translator. Translate the following text from {source_language} to {target_language}. "
        "The text was recognized from an image, so it may contain OCR mistakes; fix obvious misspellings "
        "based on context. Keep line breaks. "
        "Respond strictly in JSON (no explanations and no code blocks) as {\"translation\": string}.\n\n"
        "Source text:\n{source_text}"
    ),
    "translate_auto": (
        "You are a professional translator. Detect the language of the following text and translate it to "
        "{target_language}. The text was recognized from an image, so it may contain OCR mistakes; fix obvious "
        "misspellings based on context. Keep line breaks. "
        "Respond strictly in JSON (no explanations and no code blocks) as {\"translation\": string}.\n\n"
        "Source text:\n{source_text}"
    ),
}


def _load_prompts(path: str = PROMPTS_PATH) -> Dict[str, str]:
    prompts = dict(_DEFAULT_PROMPTS)
    if not os.path.exists(path):
        return prompts
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Could not load prompts from %s: %s", path, exc)
        return prompts
    if isinstance(data, dict):
        prompts.update({str(k): v for k, v in data.items() if isinstance(v, str)})
    return prompts


def _fill_prompt_template(tmpl: str, **values: str) -> str:
    """Fill a user-editable template that may contain literal braces.

    All braces are escaped first, then only the placeholders present in
    ``values`` are restored before ``str.format``.
    """
    safe = tmpl.replace("{", "{{").replace("}", "}}")
    for key in values:
        safe = safe.replace("{{" + key + "}}", "{" + key + "}")
    return safe.format(**values)


# A whole answer wrapped in a Markdown code fence, with an optional language tag
_FENCE_RE = re.compile(r"^```[\w-]*\n(?P<body>.*?)\n?```$", re.DOTALL)


def _unfence(answer: str) -> str:
    match = _FENCE_RE.match(answer)
    return match.group("body").strip() if match else answer


def _decode_answer(body: str) -> Optional[Dict[str, Any]]:
    """Decode the first JSON object in ``body``; None for a plain-text answer."""
    start = body.find("{")
    if start == -1:
        return None
    try:
        obj, _ = json.JSONDecoder().raw_decode(body, start)
    except ValueError:
        return None
    return obj if isinstance(obj, dict) else None


def extract_translation(response_text: str) -> str:
    """Pull the translation out of the model's answer.

    The prompts ask for ``{"translation": string}``. Models sometimes wrap
    that in a code fence or add a sentence before it, both are tolerated. A
    JSON answer without a usable ``translation`` is rejected; an answer with
    no JSON at all is taken as the translation itself.

    Doxygen:
    - @param response_text: Raw text returned by the model.
    - @return: Translated text.
    - @throws ValueError: If the answer carries no usable text.
    """
    body = _unfence((response_text or "").strip())
    answer = _decode_answer(body)
    if answer is not None:
        value = answer.get("translation")
        if isinstance(value, str) and value.strip():
            return value
        raise ValueError("Provider JSON answer has no 'translation' field")
    if not body:
        raise ValueError("Provider returned an empty translation")
    return body


def translate_text(
    client: OpenAI,
    model: str,
    text: str,
    target_locale: str,
    source_locale: Optional[str] = None,
    timeout: float | None = 60.0,
    prompts: Optional[Dict[str, str]] = None,
) -> str:
    """Translate ``text`` into ``target_locale``.

    Doxygen:
    - @param client: OpenAI instance to use for requests.
    - @param model: Target model id.
    - @param text: Source text to translate.
    - @param target_locale: Target locale code, e.g. 'es'.
    - @param source_locale: Source locale code, or None to let the model infer it.
    - @param timeout: Request timeout in seconds.
    - @return: Translated text.
    - @throws ValueError: If the answer carries no translation.
    """
    prompts = prompts or _load_prompts()
    target_name = locale_display_name(target_locale) or target_locale
    if source_locale:
        source_name = locale_display_name(source_locale) or source_locale
        prompt = _fill_prompt_template(
            prompts["translate"],
            source_language=source_name,
            target_language=target_name,
            source_text=text,
        )
    else:
        prompt = _fill_prompt_template(
            prompts["translate_auto"],
            target_language=target_name,
            source_text=text,
        )
    out = complete_prompt(client, model, messages=[{"role": "user", "content": prompt}], timeout=timeout)
    return extract_translation(out)


class LlmTranslationEngine:
    """Provider engine used by the bridge: ``localize_text`` in, translation out."""

    def __init__(self, client: OpenAI, model: str, timeout: float | None = 60.0) -> None:
        self.client = client
        self.model = model
        self.timeout = timeout
        self.prompts = _load_prompts()

    @classmethod
    def from_settings(cls, settings: Settings) -> "LlmTranslationEngine":
        client = create_provider_client(settings.require_api_key(), base_url=settings.provider_url)
        return cls(client, settings.model, timeout=settings.request_timeout)

    def localize_text(self, text: str, source_locale: Optional[str], target_locale: str) -> str:
        return translate_text(
            self.client,
            self.model,
            text,
            target_locale=target_locale,
            source_locale=source_locale,
            timeout=self.timeout,
            prompts=self.prompts,
        )
