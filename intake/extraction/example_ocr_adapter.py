"""Example OCR client adapter.

Use this module as a reference when implementing new OCR providers.
Implement BaseOcrClient and register the provider in TextExtractorFactory.
"""

from intake.extraction.ocr_client_base import BaseOcrClient


class ExampleOcrAdapter(BaseOcrClient):
    """Returns a fixed transcription without any network calls."""

    def __init__(self, text: str = "Scanned document text unavailable in example mode.") -> None:
        self._text = text

    def extract_text(self, image_bytes: bytes, mime_type: str) -> str:
        _ = image_bytes, mime_type
        return self._text
