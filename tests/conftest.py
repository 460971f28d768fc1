import asyncio

import cv2
import numpy as np
import pytest

from lingolens.image import ImageResource


class FakeWorker:
    def __init__(self, language, factory):
        self.language = language
        self.factory = factory
        self.calls = 0
        self.terminate_calls = 0

    async def detect(self, image):
        self.calls += 1
        if self.factory.gate is not None:
            await self.factory.gate.wait()
        if self.factory.detect_error is not None:
            raise self.factory.detect_error
        return {"script": self.factory.script}

    async def recognize(self, image):
        self.calls += 1
        if self.factory.gate is not None:
            await self.factory.gate.wait()
        if self.factory.recognize_error is not None:
            raise self.factory.recognize_error
        image.to_rgb()
        return {"text": self.factory.text, "confidence": 91.5}

    def terminate(self):
        self.terminate_calls += 1


class FakeWorkerFactory:
    """Stands in for `create_worker`; records every worker it hands out."""

    def __init__(self, script="Latin", text="Hello world", detect_error=None,
                 recognize_error=None, create_error=None, gate=None):
        self.script = script
        self.text = text
        self.detect_error = detect_error
        self.recognize_error = recognize_error
        self.create_error = create_error
        self.gate = gate
        self.workers = []

    def __call__(self, language):
        if self.create_error is not None:
            raise self.create_error
        worker = FakeWorker(language, self)
        self.workers.append(worker)
        return worker

    @property
    def languages(self):
        return [w.language for w in self.workers]


class FakeTranslator:
    def __init__(self, translation="Hola mundo", error=None):
        self.translation = translation
        self.error = error
        self.calls = []

    async def translate(self, text, source_locale, target_locale):
        self.calls.append((text, source_locale, target_locale))
        if self.error is not None:
            raise self.error
        return self.translation


def _png_bytes(width=64, height=32):
    img = np.full((height, width, 3), 255, dtype=np.uint8)
    img[10:20, 10:50] = 0
    ok, buf = cv2.imencode(".png", img)
    assert ok
    return buf.tobytes()


@pytest.fixture
def png_bytes():
    return _png_bytes()


@pytest.fixture
def make_image():
    def _make(name="photo.png"):
        return ImageResource.from_bytes(_png_bytes(), name=name)
    return _make


@pytest.fixture
def fake_workers():
    return FakeWorkerFactory


@pytest.fixture
def fake_translator():
    return FakeTranslator


@pytest.fixture
def run():
    return asyncio.run
