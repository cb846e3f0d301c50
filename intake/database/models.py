from dataclasses import dataclass
from datetime import datetime

from intake.processor.models import DocumentSubmission


@dataclass
class SubmissionJob:
    """A claimed row from the document_submissions table."""

    submission: DocumentSubmission
    status: str
    attempts: int
    error_message: str | None = None
    locked_at: datetime | None = None
