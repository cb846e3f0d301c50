from unittest.mock import MagicMock

from intake.analysis.capability import BaseClassificationCapability
from intake.ingest.staging import StagingArea
from intake.processor.models import DocumentClassification, DocumentSubmission, MedicalInfo

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


def audit_events(audit_store: MagicMock) -> list[str]:
    """Event types appended to a mocked audit store, in order."""
    return [call.args[0].event_type for call in audit_store.append.call_args_list]


def audit_payloads(audit_store: MagicMock, event_type: str) -> list[dict[str, object]]:
    return [
        call.args[0].payload
        for call in audit_store.append.call_args_list
        if call.args[0].event_type == event_type
    ]


def stage_submission(
    staging: StagingArea,
    data: bytes,
    *,
    submission_id: str = "sub-1",
    filename: str = "referral.txt",
    mime_type: str = "text/plain",
    size_bytes: int | None = None,
    export_pending: bool = False,
) -> DocumentSubmission:
    path = staging.write(submission_id, data)
    return DocumentSubmission(
        id=submission_id,
        original_filename=filename,
        mime_type=mime_type,
        size_bytes=len(data) if size_bytes is None else size_bytes,
        staging_path=path,
        submitted_by="user-7",
        export_pending=export_pending,
    )


class StubCapability(BaseClassificationCapability):
    """Deterministic classification capability for pipeline tests."""

    def __init__(
        self,
        classification: DocumentClassification | Exception | None = None,
        medical_info: MedicalInfo | Exception | None = None,
    ) -> None:
        self._classification = classification or DocumentClassification(
            document_type="lab_report",
            confidence=0.92,
            summary="Routine lab panel.",
            key_data={"urgent": False},
        )
        self._medical_info = medical_info if medical_info is not None else MedicalInfo()
        self.calls: list[str] = []

    def classify(self, text: str, filename: str) -> DocumentClassification:
        self.calls.append("classify")
        if isinstance(self._classification, Exception):
            raise self._classification
        return self._classification

    def extract_medical_entities(self, text: str) -> MedicalInfo:
        self.calls.append("extract_medical_entities")
        if isinstance(self._medical_info, Exception):
            raise self._medical_info
        return self._medical_info
