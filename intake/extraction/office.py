import io

import docx

from intake.extraction.base import BaseExtractionStrategy
from intake.extraction.exceptions import ExtractionError

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class OfficeDocumentStrategy(BaseExtractionStrategy):
    """Extracts paragraph and table text from Word documents via python-docx.

    Legacy binary .doc files are not readable by python-docx and fail with
    ExtractionError, which the pipeline records as a degraded extraction.
    """

    name = "office-docx"

    def extract(self, data: bytes, mime_type: str) -> str:
        if mime_type != DOCX_MIME_TYPE:
            raise ExtractionError(f"Office format '{mime_type}' is not supported")
        try:
            document = docx.Document(io.BytesIO(data))
        except Exception as exc:
            raise ExtractionError(f"python-docx could not open document: {exc}") from exc

        lines = [p.text for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" | ".join(cells))
        return "\n".join(lines).strip()
