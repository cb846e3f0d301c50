import io

import pdfplumber

from intake.extraction.base import BaseExtractionStrategy
from intake.extraction.exceptions import ExtractionError


class PdfPlumberStrategy(BaseExtractionStrategy):
    """Extracts text from PDF using pdfplumber."""

    name = "pdf-pdfplumber"

    def extract(self, data: bytes, mime_type: str) -> str:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise ExtractionError(f"pdfplumber extraction failed: {exc}") from exc
        return "\n".join(pages).strip()
