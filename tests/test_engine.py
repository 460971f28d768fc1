import asyncio

import pytest
import pytesseract

from lingolens.ocr import engine
from lingolens.ocr.engine import (
    OSD_MODE,
    TesseractWorker,
    assemble_text,
    build_dataframe_from_tesseract,
    create_worker,
    group_words_to_lines,
)


def _tesseract_data():
    return {
        'level': [5, 5, 5, 5, 5, 5],
        'block_num': [1, 1, 1, 1, 2, 2],
        'par_num': [1, 1, 1, 1, 1, 1],
        'line_num': [1, 1, 2, 2, 1, 1],
        'word_num': [1, 2, 1, 2, 1, 2],
        'left': [40, 10, 10, 60, 10, 50],
        'top': [10, 10, 30, 30, 80, 80],
        'width': [20, 20, 40, 20, 30, 30],
        'height': [12, 12, 12, 12, 12, 12],
        'conf': ['90', '80', '70', '-1', '95', 85.0],
        'text': ['world', 'Hello', 'second', ' ', 'Next', 'block'],
    }


def test_build_dataframe_from_tesseract_filters_empty_and_low_conf():
    df = build_dataframe_from_tesseract(_tesseract_data())
    assert len(df) == 5
    assert ' ' not in df['text'].tolist()


def test_build_dataframe_from_tesseract_handles_no_words():
    df = build_dataframe_from_tesseract({'text': [], 'conf': []})
    assert df.empty
    assert group_words_to_lines(df) == []


def test_group_words_to_lines_orders_words_left_to_right():
    lines = group_words_to_lines(build_dataframe_from_tesseract(_tesseract_data()))
    assert [ln['text'] for ln in lines] == ['Hello world', 'second', 'Next block']
    assert lines[0]['confidence'] == pytest.approx(85.0)


def test_assemble_text_separates_paragraphs():
    lines = group_words_to_lines(build_dataframe_from_tesseract(_tesseract_data()))
    assert assemble_text(lines) == "Hello world\nsecond\n\nNext block"


def test_worker_recognize_uses_language_and_builds_text(monkeypatch, make_image):
    seen = {}

    def fake_image_to_data(img, lang=None, output_type=None):
        seen['lang'] = lang
        seen['shape'] = img.shape
        return _tesseract_data()

    monkeypatch.setattr(pytesseract, "image_to_data", fake_image_to_data)
    worker = TesseractWorker("jpn")
    out = asyncio.run(worker.recognize(make_image()))
    assert seen['lang'] == "jpn"
    assert seen['shape'][2] == 3
    assert out['text'].startswith("Hello world")
    assert 0 < out['confidence'] <= 100


def test_worker_detect_returns_script(monkeypatch, make_image):
    monkeypatch.setattr(
        pytesseract, "image_to_osd",
        lambda img, output_type=None: {'script': 'Japanese', 'script_conf': 4.2, 'rotate': 0},
    )
    worker = TesseractWorker(OSD_MODE)
    out = asyncio.run(worker.detect(make_image()))
    assert out['script'] == "Japanese"


def test_worker_modes_are_exclusive(make_image):
    with pytest.raises(RuntimeError):
        asyncio.run(TesseractWorker("eng").detect(make_image()))
    with pytest.raises(RuntimeError):
        asyncio.run(TesseractWorker(OSD_MODE).recognize(make_image()))


def test_terminated_worker_refuses_work(make_image):
    worker = TesseractWorker("eng")
    worker.terminate()
    with pytest.raises(RuntimeError):
        asyncio.run(worker.recognize(make_image()))


def test_create_worker_checks_installed_languages(monkeypatch):
    engine.installed_languages.cache_clear()
    monkeypatch.setattr(pytesseract, "get_languages", lambda config="": ["eng", "osd"])
    try:
        assert create_worker("eng").language == "eng"
        assert create_worker(OSD_MODE).language == OSD_MODE
        with pytest.raises(RuntimeError):
            create_worker("jpn")
        with pytest.raises(RuntimeError):
            create_worker("auto")
    finally:
        engine.installed_languages.cache_clear()
