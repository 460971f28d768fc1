import json

import httpx
import pytest

from lingolens.errors import TranslationFailure
from lingolens.lang import Locale
from lingolens.translation import GENERIC_ERROR, TranslationClient


def _client(handler):
    return TranslationClient("http://bridge.test/", transport=httpx.MockTransport(handler))


def test_translate_posts_json_and_returns_translation(run):
    seen = {}

    def handler(request):
        seen['url'] = str(request.url)
        seen['method'] = request.method
        seen['body'] = json.loads(request.content)
        return httpx.Response(200, json={"translation": "Hola"})

    out = run(_client(handler).translate("Hello", Locale.JA, Locale.ES))
    assert out == "Hola"
    assert seen['method'] == "POST"
    assert seen['url'] == "http://bridge.test/api/translate"
    assert seen['body'] == {"text": "Hello", "sourceLang": "ja", "targetLang": "es"}


def test_translate_forwards_auto_sentinel(run):
    seen = {}

    def handler(request):
        seen['body'] = json.loads(request.content)
        return httpx.Response(200, json={"translation": "ok"})

    run(_client(handler).translate("Hello", Locale.AUTO, "fr"))
    assert seen['body']['sourceLang'] == "auto"
    assert seen['body']['targetLang'] == "fr"


def test_server_error_carries_bridge_message(run):
    handler = lambda request: httpx.Response(500, json={"error": "Translation failed. Please try again."})
    with pytest.raises(TranslationFailure) as excinfo:
        run(_client(handler).translate("Hello", Locale.EN, Locale.ES))
    assert excinfo.value.user_message == "Translation failed. Please try again."
    assert excinfo.value.detail == "HTTP 500"


def test_error_without_message_uses_generic(run):
    handler = lambda request: httpx.Response(502, text="<html>Bad gateway</html>")
    with pytest.raises(TranslationFailure) as excinfo:
        run(_client(handler).translate("Hello", Locale.EN, Locale.ES))
    assert excinfo.value.user_message == GENERIC_ERROR


def test_malformed_success_response(run):
    handler = lambda request: httpx.Response(200, json={"result": "Hola"})
    with pytest.raises(TranslationFailure):
        run(_client(handler).translate("Hello", Locale.EN, Locale.ES))


def test_unreachable_bridge(run):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TranslationFailure) as excinfo:
        run(_client(handler).translate("Hello", Locale.EN, Locale.ES))
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_unencodable_text_is_a_translation_failure(run):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"translation": "never"})

    with pytest.raises(TranslationFailure) as excinfo:
        run(_client(handler).translate("bad \ud800 glyph", Locale.EN, Locale.ES))
    assert excinfo.value.user_message == "The text could not be sent for translation."
    assert calls == []
