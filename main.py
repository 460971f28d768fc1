"""
Entry point for the image → OCR → translation pipeline and its bridge.

Packages:
- lingolens.ocr: Tesseract workers, script detection and text extraction
- lingolens.translation: Client for the translation bridge
- lingolens.pipeline: High-level orchestration (`process_image_translate`)
- lingolens.bridge: HTTP bridge in front of the translation provider
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from lingolens.config import Settings, configure_dependencies, load_settings
from lingolens.errors import ConfigurationFailure, PipelineError
from lingolens.lang import normalize_and_validate_target_locale, parse_source_language
from lingolens.logging_config import setup_logging
from lingolens.pipeline import PipelineState, process_image_translate

logger = logging.getLogger(__name__)


def _serve(settings: Settings, host: str, port: int) -> None:
    import uvicorn

    from lingolens.bridge import create_app

    try:
        app = create_app(settings)
    except ConfigurationFailure as e:
        # No provider credential
        logger.error("%s Server exiting.", e)
        raise SystemExit(1)
    logger.info("Bridge running on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


def _cli() -> None:
    """CLI for image translation and for running the bridge.

    Image mode:
    --image / -i: Path to input image
    --source / -s: OCR language (eng|jpn|chi_sim|fra|spa|hin) or 'auto' (default: auto)
    --target / -t: Target locale code (default: es)
    --bridge-url: Translation bridge base URL (default from settings)
    --timeout: Bridge request timeout seconds (<=0 means no timeout)

    Bridge mode (processed before image mode if provided):
    --serve: Run the translation bridge
    --host / --port: Bind address (default from settings)
    """
    import argparse

    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"Invalid settings:\n{e}")
        raise SystemExit(2)

    parser = argparse.ArgumentParser(description="Extract text from an image and translate it through the LingoLens bridge.")
    # bridge mode
    parser.add_argument("--serve", action="store_true", help="Run the translation bridge instead of processing an image")
    parser.add_argument("--host", type=str, default=settings.host, help=f"Bridge bind host (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bridge bind port (default: {settings.port})")
    # image mode
    parser.add_argument("--image", "-i", type=str, help="Path to input image to translate")
    parser.add_argument("--source", "-s", type=str, default="auto", help="OCR language code or 'auto' to detect the script (default: auto)")
    parser.add_argument("--target", "-t", type=str, default="es", help="Target locale code (default: es)")
    parser.add_argument("--bridge-url", type=str, default=settings.bridge_url, help=f"Translation bridge URL (default: {settings.bridge_url})")
    parser.add_argument("--timeout", type=float, default=settings.request_timeout or 0, help="Bridge request timeout in seconds (set 0 or negative for no timeout)")
    parser.add_argument("--log-level", type=str, default=settings.log_level, help="Logging level (default from settings)")
    parser.add_argument("--log-dir", type=str, default=None, help="Also write logs to this directory")

    args = parser.parse_args()

    setup_logging(args.log_level, log_dir=args.log_dir)
    configure_dependencies(settings)

    if args.serve:
        _serve(settings, args.host, args.port)
        return

    if not args.image:
        print("Please provide either --image path to translate or --serve to run the bridge.")
        print("Examples:\n  python main.py --image photo.png --source auto --target es\n  python main.py --serve --port 3001")
        raise SystemExit(2)

    # Validate selector values before any work starts
    try:
        source = parse_source_language(args.source)
        target = normalize_and_validate_target_locale(args.target)
    except ValueError as e:
        print(str(e))
        raise SystemExit(2)

    timeout_value = None if args.timeout is not None and args.timeout <= 0 else args.timeout
    try:
        ctx = process_image_translate(
            image_path=args.image,
            source=source.value,
            target=target.value,
            bridge_url=args.bridge_url,
            request_timeout=timeout_value,
        )
    except FileNotFoundError as e:
        print(str(e))
        raise SystemExit(1)
    except PipelineError as e:
        # Raised before the run starts, e.g. an empty image file
        print(e.describe())
        raise SystemExit(1)

    if ctx.extracted_text is not None:
        print("\n=== Original text ===")
        print(ctx.extracted_text)
    if ctx.state is PipelineState.DONE:
        print(f"\n=== Translation ({ctx.source_locale.value if ctx.source_locale else '?'} -> {ctx.target.value}) ===")
        print(ctx.translated_text)
        return
    print(f"\n{ctx.error_message}")
    raise SystemExit(1)


if __name__ == "__main__":
    _cli()
