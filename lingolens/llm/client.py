"""Provider access for the translation bridge.

The bridge reaches an OpenAI-compatible chat endpoint (OpenRouter by
default) through the ``openai`` client. Retries are disabled so a failed
provider call surfaces to the caller exactly once.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from openai import OpenAI

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


def create_provider_client(api_key: str, base_url: str = DEFAULT_BASE_URL) -> OpenAI:
    """Build the provider client.

    Doxygen:
    - @param api_key: Provider credential (never logged).
    - @param base_url: OpenAI-compatible API root.
    - @return: `OpenAI` instance with automatic retries turned off.
    """
    logger.info("Provider client targets %s", base_url)
    return OpenAI(base_url=base_url, api_key=api_key, max_retries=0)


def complete_prompt(
    client: OpenAI,
    model: str,
    messages: List[Dict[str, str]],
    timeout: float | None = 60.0,
) -> str:
    """Run one chat completion and hand back the first choice's text.

    An empty or missing message body comes back as ``""`` so the caller
    decides how to treat a blank answer.
    """
    completion = client.chat.completions.create(model=model, messages=messages, timeout=timeout)
    if not completion.choices:
        return ""
    return completion.choices[0].message.content or ""
