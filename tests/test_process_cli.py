import functools
import sys

import pytest

import main
from lingolens.config import Settings
from lingolens.errors import ExtractionFailure
from lingolens.ocr import ScriptDetector, TextExtractor
from lingolens.pipeline import PipelineController, PipelineState, print_progress, process_image_translate
from lingolens.pipeline.state import RunContext
from lingolens.lang import Locale, OcrLanguage


@pytest.fixture
def image_file(tmp_path, png_bytes):
    path = tmp_path / "menu.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def fake_controller(fake_workers, fake_translator):
    def _make(text="Menu of the day", translation="Menú del día"):
        return PipelineController(
            detector=ScriptDetector(fake_workers()),
            extractor=TextExtractor(fake_workers(text=text)),
            translator=fake_translator(translation),
        )
    return _make


@pytest.fixture
def cli(monkeypatch):
    """Run `main._cli` with the given arguments, without touching real settings or logging."""
    monkeypatch.setattr(main, "load_settings", lambda: Settings())
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)

    def _run(*argv):
        monkeypatch.setattr(sys, "argv", ["main.py", *argv])
        main._cli()
    return _run


def test_process_image_translate_reads_file_and_prints_progress(image_file, fake_controller, capsys):
    controller = fake_controller()
    ctx = process_image_translate(str(image_file), source="eng", target="es", controller=controller)

    assert ctx.state is PipelineState.DONE
    assert ctx.translated_text == "Menú del día"
    out = capsys.readouterr().out
    assert "Scanning image..." in out
    assert "Done!" in out
    # The file-backed handle is released once the call returns
    assert controller.image.released
    assert controller._listeners == []


def test_process_image_translate_missing_file(tmp_path, fake_controller):
    with pytest.raises(FileNotFoundError):
        process_image_translate(str(tmp_path / "nope.png"), controller=fake_controller())


def test_print_progress_shows_failure_message(capsys):
    ctx = RunContext(source=OcrLanguage.ENGLISH, target=Locale.ES).advance(PipelineState.EXTRACTING)
    print_progress(ctx.fail(ExtractionFailure()))
    out = capsys.readouterr().out
    assert "Text extraction failed: No text found in the image." in out
    assert out.endswith("\n")


def test_print_progress_ignores_idle(capsys):
    print_progress(RunContext(source=OcrLanguage.AUTO, target=Locale.ES))
    assert capsys.readouterr().out == ""


def test_cli_prints_text_and_translation(cli, monkeypatch, image_file, fake_controller, capsys):
    run = functools.partial(process_image_translate, controller=fake_controller(), show_progress=False)
    monkeypatch.setattr(main, "process_image_translate", run)

    cli("--image", str(image_file), "--source", "eng", "--target", "es")

    out = capsys.readouterr().out
    assert "Menu of the day" in out
    assert "=== Translation (en -> es) ===" in out
    assert "Menú del día" in out


def test_cli_reports_phase_failure(cli, monkeypatch, image_file, fake_controller, capsys):
    run = functools.partial(process_image_translate, controller=fake_controller(text="  "), show_progress=False)
    monkeypatch.setattr(main, "process_image_translate", run)

    with pytest.raises(SystemExit) as excinfo:
        cli("--image", str(image_file), "--source", "eng")
    assert excinfo.value.code == 1
    assert "Text extraction failed" in capsys.readouterr().out


def test_cli_missing_image_file(cli, tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli("--image", str(tmp_path / "nope.png"))
    assert excinfo.value.code == 1
    assert "Image file not found" in capsys.readouterr().out


def test_cli_empty_image_file(cli, tmp_path, capsys):
    empty = tmp_path / "empty.png"
    empty.write_bytes(b"")
    with pytest.raises(SystemExit) as excinfo:
        cli("--image", str(empty))
    assert excinfo.value.code == 1
    assert "The uploaded image is empty." in capsys.readouterr().out


def test_cli_rejects_unknown_target(cli, image_file, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli("--image", str(image_file), "--target", "tlh")
    assert excinfo.value.code == 2


def test_cli_invalid_settings_exit_cleanly(monkeypatch, capsys):
    monkeypatch.setenv("LINGOLENS_PORT", "abc")
    monkeypatch.setattr(sys, "argv", ["main.py", "--serve"])
    with pytest.raises(SystemExit) as excinfo:
        main._cli()
    assert excinfo.value.code == 2
    assert "Invalid settings" in capsys.readouterr().out
