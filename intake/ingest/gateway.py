import uuid
from pathlib import Path
from typing import ClassVar

from intake.audit.events import AuditEvent
from intake.audit.logger import AuditLogger
from intake.config.settings import Settings
from intake.database.repositories.audit_repository import AuditRepository
from intake.database.repositories.submission_repository import SubmissionRepository
from intake.ingest.exceptions import PayloadTooLarge, UnsupportedFormat
from intake.ingest.staging import StagingArea
from intake.logging.logger import Log
from intake.processor.models import DocumentSubmission


class IngestGateway:
    """Validates uploads and hands accepted ones to the staging area."""

    ALLOWED_MIME_TYPES: ClassVar[frozenset[str]] = frozenset({
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
        "image/jpeg",
        "image/png",
        "image/tiff",
        "text/plain",
    })

    def __init__(
        self,
        staging: StagingArea,
        submission_repo: SubmissionRepository,
        audit: AuditLogger,
        max_upload_bytes: int,
    ) -> None:
        self._staging = staging
        self._submission_repo = submission_repo
        self._audit = audit
        self._max_upload_bytes = max_upload_bytes

    def submit(
        self,
        file_bytes: bytes,
        filename: str,
        declared_mime_type: str,
        submitted_by: str,
        declared_size: int | None = None,
        export_pending: bool = False,
    ) -> DocumentSubmission:
        """Validate and stage an upload.

        Raises:
            PayloadTooLarge: if the declared or actual size exceeds the ceiling.
            UnsupportedFormat: if the MIME type is not allowed.
        """
        submission_id = uuid.uuid4().hex
        mime_type = declared_mime_type.split(";", 1)[0].strip().lower()
        size = max(len(file_bytes), declared_size or 0)

        if size > self._max_upload_bytes:
            self._reject(submission_id, filename, submitted_by, "payload-too-large", size=size)
            raise PayloadTooLarge(size, self._max_upload_bytes)
        if mime_type not in self.ALLOWED_MIME_TYPES:
            self._reject(
                submission_id, filename, submitted_by, "unsupported-format", mime_type=mime_type
            )
            raise UnsupportedFormat(mime_type)

        path = self._staging.write(submission_id, file_bytes)
        submission = DocumentSubmission(
            id=submission_id,
            original_filename=filename,
            mime_type=mime_type,
            size_bytes=declared_size if declared_size is not None else len(file_bytes),
            staging_path=path,
            submitted_by=submitted_by,
            export_pending=export_pending,
        )
        try:
            self._submission_repo.insert(submission)
            self._audit.record(
                submission_id,
                AuditEvent.SUBMITTED,
                actor=submitted_by,
                filename=filename,
                mime_type=mime_type,
                size_bytes=submission.size_bytes,
            )
        except Exception:
            # no worker will ever claim an unrecorded submission
            self._staging.discard(submission_id)
            raise
        Log.info(f"Accepted submission {submission_id}", filename=filename, size=size)
        return submission

    def _reject(
        self,
        submission_id: str,
        filename: str,
        submitted_by: str,
        reason: str,
        **details: object,
    ) -> None:
        Log.warning(f"Rejected upload {filename!r}: {reason}", **details)
        self._audit.record(
            submission_id,
            AuditEvent.REJECTED_INGRESS,
            actor=submitted_by,
            filename=filename,
            reason=reason,
            **details,
        )


def build_ingest_gateway(settings: Settings) -> IngestGateway:
    """Build an ingest gateway backed by the configured staging area and database."""
    return IngestGateway(
        staging=StagingArea(Path(settings.staging_dir), Path(settings.retained_dir)),
        submission_repo=SubmissionRepository(settings.max_job_attempts),
        audit=AuditLogger(AuditRepository()),
        max_upload_bytes=settings.max_upload_bytes,
    )
