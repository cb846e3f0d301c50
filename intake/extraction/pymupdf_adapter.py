import pymupdf

from intake.extraction.base import BaseExtractionStrategy
from intake.extraction.exceptions import ExtractionError


class PyMuPdfStrategy(BaseExtractionStrategy):
    """Extracts text from PDF using PyMuPDF."""

    name = "pdf-pymupdf"

    def extract(self, data: bytes, mime_type: str) -> str:
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    raise ExtractionError("PDF is password protected")
                pages = [page.get_text() for page in doc]
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"pymupdf extraction failed: {exc}") from exc
        return "\n".join(pages).strip()
