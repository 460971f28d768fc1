"""
LingoLens: image → OCR → translation.

Packages:
- lingolens.lang: OCR language identifiers, locales and the mapping between them
- lingolens.image: Image handles borrowed by a run
- lingolens.ocr: Tesseract workers, script detection and text extraction
- lingolens.translation: Client for the translation bridge
- lingolens.pipeline: Run state machine and controller
- lingolens.bridge: HTTP bridge in front of the translation provider
- lingolens.llm: Provider client and prompt-based translation
"""

__version__ = "0.1.0"
