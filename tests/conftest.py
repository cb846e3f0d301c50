import io
from pathlib import Path
from unittest.mock import MagicMock

import docx
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from intake.audit.logger import AuditLogger
from intake.database.repositories.audit_repository import AuditRepository
from intake.ingest.staging import StagingArea
from tests.helpers import PNG_HEADER


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Referral for cardiology consult")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    """Generate a Word document with one paragraph and a two-column table."""
    document = docx.Document()
    document.add_paragraph("Discharge summary")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Medication"
    table.rows[0].cells[1].text = "Aspirin 81mg"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def sample_png_bytes() -> bytes:
    return PNG_HEADER + b"\x00" * 32


@pytest.fixture()
def staging(tmp_path: Path) -> StagingArea:
    return StagingArea(tmp_path / "staging", tmp_path / "retained")


@pytest.fixture()
def audit_store() -> MagicMock:
    store = MagicMock(spec=AuditRepository)
    store.append.return_value = 1
    return store


@pytest.fixture()
def audit(audit_store: MagicMock) -> AuditLogger:
    return AuditLogger(audit_store)

