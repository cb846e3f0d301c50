from intake.capabilities.exceptions import CapabilityError
from intake.capabilities.timeout import call_with_timeout
from intake.extraction.base import BaseExtractionStrategy
from intake.extraction.exceptions import ExtractionError
from intake.extraction.ocr_client_base import BaseOcrClient


class ImageOcrStrategy(BaseExtractionStrategy):
    """Delegates image transcription to an external OCR capability."""

    name = "image-ocr"

    def __init__(self, client: BaseOcrClient, timeout_seconds: float) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds

    def extract(self, data: bytes, mime_type: str) -> str:
        try:
            text = call_with_timeout(
                self._client.extract_text, self._timeout_seconds, data, mime_type
            )
        except CapabilityError as exc:
            raise ExtractionError(f"OCR capability failed: {exc}") from exc
        return text.strip()
