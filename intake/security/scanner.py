from intake.audit.events import AuditEvent
from intake.audit.logger import AuditLogger
from intake.ingest.staging import StagingArea
from intake.logging.logger import Log
from intake.processor.exceptions import StagedFileMissingError
from intake.processor.models import DocumentSubmission, SecurityScanOutcome
from intake.security.inspectors import BaseContentInspector, ThreatLabel, default_inspectors


class SecurityScanner:
    """Screens staged uploads before any text is extracted.

    A failed scan is a normal outcome, never an exception.
    """

    def __init__(
        self,
        staging: StagingArea,
        audit: AuditLogger,
        max_upload_bytes: int,
        inspectors: list[BaseContentInspector] | None = None,
    ) -> None:
        self._staging = staging
        self._audit = audit
        self._max_upload_bytes = max_upload_bytes
        self._inspectors = inspectors if inspectors is not None else default_inspectors()

    def scan(self, submission: DocumentSubmission) -> SecurityScanOutcome:
        self._audit.record(submission.id, AuditEvent.SCAN_STARTED, mime_type=submission.mime_type)
        threats = self._collect_threats(submission)
        outcome = SecurityScanOutcome(passed=not threats, threats=threats)

        if outcome.passed:
            self._audit.record(submission.id, AuditEvent.SCAN_PASSED)
        else:
            Log.warning(
                f"Submission {submission.id} failed security scan",
                threats=",".join(threats),
            )
            self._audit.record(submission.id, AuditEvent.REJECTED_SCAN, threats=threats)
        return outcome

    def _collect_threats(self, submission: DocumentSubmission) -> list[str]:
        try:
            actual_size = self._staging.size_of(submission)
        except StagedFileMissingError:
            return [ThreatLabel.STAGED_FILE_MISSING]

        threats: list[str] = []
        if actual_size > self._max_upload_bytes:
            # Oversized content is never read into memory.
            return [ThreatLabel.FILE_SIZE_EXCEEDS_LIMIT]
        if actual_size != submission.size_bytes:
            threats.append(ThreatLabel.DECLARED_SIZE_MISMATCH)

        try:
            data = self._staging.load(submission)
            for inspector in self._inspectors:
                if inspector.applies_to(submission.mime_type):
                    for label in inspector.inspect(data, submission.mime_type):
                        if label not in threats:
                            threats.append(label)
        except Exception as exc:
            Log.error(f"Security scan error for submission {submission.id}: {exc}")
            threats.append(ThreatLabel.SCAN_ERROR)
        return threats
