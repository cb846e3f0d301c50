"""Download exports and email/fax transmissions of processed documents."""

import uuid
from collections.abc import Callable
from datetime import datetime
from pathlib import Path, PurePath

from intake.audit.events import AuditEvent
from intake.audit.logger import AuditLogger
from intake.capabilities.exceptions import CapabilityError, CapabilityTimeout
from intake.capabilities.timeout import call_with_timeout
from intake.compliance.exceptions import ScrubError
from intake.compliance.scrubber import ComplianceScrubber
from intake.config.settings import Settings
from intake.database.repositories.audit_repository import AuditRepository
from intake.database.repositories.submission_repository import SubmissionRepository
from intake.database.repositories.transmission_repository import TransmissionRepository
from intake.export.email_channel_base import BaseEmailChannel
from intake.export.exceptions import ChannelError, ExportUnavailable, TransmissionFailed
from intake.export.factory import ChannelFactory
from intake.export.fax_channel_base import BaseFaxChannel
from intake.export.models import (
    EmailMessage,
    EmailParams,
    ExportArtifact,
    ExportFormat,
    FaxJob,
    FaxParams,
)
from intake.export.reports import render_annotated_document, render_summary_report
from intake.ingest.staging import StagingArea
from intake.logging.logger import Log
from intake.processor.exceptions import SubmissionNotFoundError
from intake.processor.models import (
    DocumentSubmission,
    ProcessingResult,
    TransmissionChannel,
    TransmissionRecord,
    utcnow,
)

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class ExportManager:
    """Renders exports and hands transmissions to the configured channels.

    Every export and every transmission attempt leaves exactly one
    TransmissionRecord and one audit entry, including failed attempts.
    """

    def __init__(
        self,
        *,
        staging: StagingArea,
        submission_repo: SubmissionRepository,
        transmission_repo: TransmissionRepository,
        audit: AuditLogger,
        email_channel: BaseEmailChannel,
        fax_channel: BaseFaxChannel,
        scrubber: ComplianceScrubber,
        timeout_seconds: float,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._staging = staging
        self._submission_repo = submission_repo
        self._transmission_repo = transmission_repo
        self._audit = audit
        self._email_channel = email_channel
        self._fax_channel = fax_channel
        self._scrubber = scrubber
        self._timeout_seconds = timeout_seconds
        self._clock = clock

    # ------------------------------------------------------------------
    # Downloads
    # ------------------------------------------------------------------

    def export_original(self, submission: DocumentSubmission, requested_by: str) -> ExportArtifact:
        return self._download(
            submission.id, None, ExportFormat.ORIGINAL, requested_by,
            lambda: self._original_artifact(submission),
        )

    def export_summary_report(self, result: ProcessingResult, requested_by: str) -> ExportArtifact:
        return self._download(
            result.submission_id, result.id, ExportFormat.SUMMARY, requested_by,
            lambda: self._summary_artifact(result),
        )

    def export_annotated(self, result: ProcessingResult, requested_by: str) -> ExportArtifact:
        return self._download(
            result.submission_id, result.id, ExportFormat.ANNOTATED, requested_by,
            lambda: self._annotated_artifact(result),
        )

    def export(
        self, result: ProcessingResult, export_format: ExportFormat | str, requested_by: str
    ) -> ExportArtifact:
        """Export *result* in the requested format.

        Raises:
            ExportUnavailable: for an unknown format or a missing original.
        """
        try:
            export_format = ExportFormat(export_format)
        except ValueError as exc:
            raise ExportUnavailable(f"Invalid export format: {export_format}") from exc

        if export_format is ExportFormat.ORIGINAL:
            return self._download(
                result.submission_id, result.id, export_format, requested_by,
                lambda: self._original_artifact(self._submission_of(result)),
            )
        if export_format is ExportFormat.SUMMARY:
            return self.export_summary_report(result, requested_by)
        return self.export_annotated(result, requested_by)

    # ------------------------------------------------------------------
    # Transmissions
    # ------------------------------------------------------------------

    def transmit_by_email(
        self, result: ProcessingResult, params: EmailParams, actor: str
    ) -> TransmissionRecord:
        """Send *result* by email.

        Raises:
            TransmissionFailed: if the payload could not be assembled or delivered.
        """
        transmission_id = uuid.uuid4().hex
        metadata: dict[str, object] = {
            "attachment_format": params.attachment_format.value,
            "summary_included": params.include_summary,
            "encrypted": params.encrypt_attachment,
            "cc": list(params.cc),
        }
        try:
            message = self._assemble_email(transmission_id, result, params)
            metadata["attachment"] = message.attachments[0].filename
            receipt = call_with_timeout(
                self._email_channel.send, self._timeout_seconds, message
            )
        except Exception as exc:
            raise self._failed(
                transmission_id, result, TransmissionChannel.EMAIL, params.to, actor, metadata, exc
            ) from exc
        metadata.update(message_id=receipt.reference, status=receipt.status)
        return self._record(
            transmission_id, result, TransmissionChannel.EMAIL, params.to, actor, True, metadata
        )

    def transmit_by_fax(
        self, result: ProcessingResult, params: FaxParams, actor: str
    ) -> TransmissionRecord:
        """Send *result* by fax.

        Raises:
            TransmissionFailed: if the payload could not be assembled or delivered.
        """
        transmission_id = uuid.uuid4().hex
        metadata: dict[str, object] = {
            "document_format": params.document_format.value,
            "priority": params.priority.value,
            "cover_page": params.cover_page,
            "recipient_name": params.recipient_name,
        }
        try:
            job = self._assemble_fax(transmission_id, result, params)
            metadata["document"] = job.document.filename
            receipt = call_with_timeout(self._fax_channel.send, self._timeout_seconds, job)
        except Exception as exc:
            raise self._failed(
                transmission_id, result, TransmissionChannel.FAX,
                params.recipient_number, actor, metadata, exc,
            ) from exc
        metadata.update(fax_job_id=receipt.reference, status=receipt.status)
        return self._record(
            transmission_id, result, TransmissionChannel.FAX,
            params.recipient_number, actor, True, metadata,
        )

    # ------------------------------------------------------------------
    # Payload assembly
    # ------------------------------------------------------------------

    def _assemble_email(
        self, transmission_id: str, result: ProcessingResult, params: EmailParams
    ) -> EmailMessage:
        attachment = self._render(result, params.attachment_format)
        body = params.message
        if params.include_summary:
            body = f"{body}\n\n{self._scrubbed_summary_block(result)}".lstrip()
        return EmailMessage(
            transmission_id=transmission_id,
            to=params.to,
            cc=list(params.cc),
            subject=params.subject,
            body=body,
            attachments=[attachment],
            encrypt_attachment=params.encrypt_attachment,
        )

    def _assemble_fax(
        self, transmission_id: str, result: ProcessingResult, params: FaxParams
    ) -> FaxJob:
        document = self._render(result, params.document_format)
        cover_sheet = None
        if params.cover_page:
            cover_sheet = "\n".join(
                [
                    "FAX COVER SHEET",
                    f"To: {params.recipient_name or params.recipient_number}",
                    f"Fax: {params.recipient_number}",
                    f"Priority: {params.priority.value.upper()}",
                    f"Date: {self._clock().isoformat()}",
                    f"Document: {document.filename}",
                    "",
                    params.cover_message,
                    "",
                    "CONFIDENTIAL: This transmission contains protected health information "
                    "intended only for the named recipient.",
                ]
            )
        return FaxJob(
            transmission_id=transmission_id,
            recipient_number=params.recipient_number,
            recipient_name=params.recipient_name,
            document=document,
            cover_sheet=cover_sheet,
            priority=params.priority,
        )

    def _scrubbed_summary_block(self, result: ProcessingResult) -> str:
        scrubbed = self._scrubber.scrub(result.summary, result.medical_info)
        return "\n".join(
            [
                "--- Document summary (patient identifiers redacted) ---",
                f"Type: {result.document_type}",
                f"Confidence: {round(result.confidence * 100)}%",
                scrubbed.text or "No summary available",
            ]
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(self, result: ProcessingResult, export_format: ExportFormat) -> ExportArtifact:
        if export_format is ExportFormat.ORIGINAL:
            return self._original_artifact(self._submission_of(result))
        if export_format is ExportFormat.SUMMARY:
            return self._summary_artifact(result)
        return self._annotated_artifact(result)

    def _original_artifact(self, submission: DocumentSubmission) -> ExportArtifact:
        path = self._staging.locate_original(submission)
        if path is None:
            raise ExportUnavailable(
                f"Original of submission {submission.id} is no longer retained"
            )
        suffix = PurePath(submission.original_filename).suffix
        return ExportArtifact(
            filename=f"document_{submission.id}_original{suffix}",
            content_type=submission.mime_type,
            content=path.read_bytes(),
        )

    def _summary_artifact(self, result: ProcessingResult) -> ExportArtifact:
        return ExportArtifact(
            filename=f"document_{result.submission_id}_summary.txt",
            content_type=TEXT_CONTENT_TYPE,
            content=render_summary_report(result, self._clock()).encode("utf-8"),
        )

    def _annotated_artifact(self, result: ProcessingResult) -> ExportArtifact:
        return ExportArtifact(
            filename=f"document_{result.submission_id}_annotated.txt",
            content_type=TEXT_CONTENT_TYPE,
            content=render_annotated_document(result, self._clock()).encode("utf-8"),
        )

    def _submission_of(self, result: ProcessingResult) -> DocumentSubmission:
        try:
            return self._submission_repo.find_by_id(result.submission_id).submission
        except SubmissionNotFoundError as exc:
            raise ExportUnavailable(str(exc)) from exc

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def _download(
        self,
        submission_id: str,
        result_id: str | None,
        export_format: ExportFormat,
        requested_by: str,
        render: Callable[[], ExportArtifact],
    ) -> ExportArtifact:
        transmission_id = uuid.uuid4().hex
        try:
            artifact = render()
        except ExportUnavailable as exc:
            self._store(
                TransmissionRecord(
                    id=transmission_id,
                    submission_id=submission_id,
                    result_id=result_id,
                    channel=TransmissionChannel.DOWNLOAD,
                    recipient=requested_by,
                    success=False,
                    metadata={"format": export_format.value, "reason": str(exc)},
                ),
                AuditEvent.EXPORTED,
                requested_by,
            )
            raise

        self._store(
            TransmissionRecord(
                id=transmission_id,
                submission_id=submission_id,
                result_id=result_id,
                channel=TransmissionChannel.DOWNLOAD,
                recipient=requested_by,
                success=True,
                metadata={
                    "format": export_format.value,
                    "filename": artifact.filename,
                    "size_bytes": len(artifact.content),
                },
            ),
            AuditEvent.EXPORTED,
            requested_by,
        )
        return artifact

    def _failed(
        self,
        transmission_id: str,
        result: ProcessingResult,
        channel: TransmissionChannel,
        recipient: str,
        actor: str,
        metadata: dict[str, object],
        exc: Exception,
    ) -> TransmissionFailed:
        reason = _failure_reason(exc)
        if reason == "delivery-failed" and not isinstance(exc, (ChannelError, CapabilityError)):
            Log.exception(f"Unexpected {channel.value} transmission error")
        metadata.update(reason=reason, error=str(exc))
        record = self._record(
            transmission_id, result, channel, recipient, actor, False, metadata
        )
        return TransmissionFailed(channel, reason, record, str(exc))

    def _record(
        self,
        transmission_id: str,
        result: ProcessingResult,
        channel: TransmissionChannel,
        recipient: str,
        actor: str,
        success: bool,
        metadata: dict[str, object],
    ) -> TransmissionRecord:
        record = TransmissionRecord(
            id=transmission_id,
            submission_id=result.submission_id,
            result_id=result.id,
            channel=channel,
            recipient=recipient,
            success=success,
            metadata=dict(metadata),
        )
        event = AuditEvent.TRANSMISSION_SUCCEEDED if success else AuditEvent.TRANSMISSION_FAILED
        self._store(record, event, actor)
        return record

    def _store(self, record: TransmissionRecord, event: AuditEvent, actor: str) -> None:
        self._transmission_repo.append(record)
        self._audit.record(
            record.submission_id,
            event,
            actor=actor,
            result_id=record.result_id,
            transmission_id=record.id,
            channel=record.channel.value,
            recipient=record.recipient,
            success=record.success,
            reason=record.metadata.get("reason"),
        )
        log = Log.info if record.success else Log.warning
        log(
            f"{record.channel.value} {event.value}",
            transmission_id=record.id,
            submission_id=record.submission_id,
        )


def _failure_reason(exc: Exception) -> str:
    if isinstance(exc, ChannelError):
        return exc.reason
    if isinstance(exc, CapabilityTimeout):
        return "timeout"
    if isinstance(exc, ExportUnavailable):
        return "export-unavailable"
    if isinstance(exc, ScrubError):
        return "scrub-failed"
    return "delivery-failed"


def build_export_manager(settings: Settings) -> ExportManager:
    """Build an export manager wired to the configured channels and database."""
    return ExportManager(
        staging=StagingArea(Path(settings.staging_dir), Path(settings.retained_dir)),
        submission_repo=SubmissionRepository(settings.max_job_attempts),
        transmission_repo=TransmissionRepository(),
        audit=AuditLogger(AuditRepository()),
        email_channel=ChannelFactory.create_email_channel(settings),
        fax_channel=ChannelFactory.create_fax_channel(settings),
        scrubber=ComplianceScrubber(),
        timeout_seconds=settings.capability_timeout_seconds,
    )
