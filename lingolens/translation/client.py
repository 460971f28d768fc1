"""HTTP client for the translation bridge (`POST /api/translate`)."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

import httpx

from lingolens.errors import TranslationFailure
from lingolens.lang import Locale

logger = logging.getLogger(__name__)

DEFAULT_BRIDGE_URL = "http://localhost:3001"
DEFAULT_TIMEOUT = 60.0
GENERIC_ERROR = "Server failed to translate"


def _locale_value(locale: Union[Locale, str]) -> str:
    return locale.value if isinstance(locale, Locale) else str(locale)


class TranslationClient:
    """Thin async client for the translation bridge.

    No retries and no caching: every failure is reported once as a
    ``TranslationFailure``. A source of ``Locale.AUTO`` is sent as the
    literal ``"auto"`` and left to the bridge to infer.
    """

    def __init__(
        self,
        bridge_url: str = DEFAULT_BRIDGE_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = bridge_url.rstrip("/") + "/api/translate"
        self.timeout = timeout
        self._transport = transport

    async def translate(
        self,
        text: str,
        source_locale: Union[Locale, str],
        target_locale: Union[Locale, str],
    ) -> str:
        payload = {
            "text": text,
            "sourceLang": _locale_value(source_locale),
            "targetLang": _locale_value(target_locale),
        }
        logger.info("Requesting translation %s -> %s", payload["sourceLang"], payload["targetLang"])
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                try:
                    request = client.build_request("POST", self.endpoint, json=payload)
                except (TypeError, ValueError) as exc:
                    # e.g. a lone surrogate from OCR output cannot be encoded as UTF-8
                    raise TranslationFailure("The text could not be sent for translation.", detail=str(exc)) from exc
                response = await client.send(request)
        except httpx.HTTPError as exc:
            raise TranslationFailure("Translation service is unreachable.", detail=str(exc)) from exc

        data: Any
        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            if not isinstance(message, str) or not message:
                message = GENERIC_ERROR
            raise TranslationFailure(message, detail=f"HTTP {response.status_code}")

        translation = data.get("translation") if isinstance(data, dict) else None
        if not isinstance(translation, str):
            raise TranslationFailure(
                "Translation service returned a malformed response.",
                detail=f"HTTP {response.status_code}",
            )
        return translation
