import uuid
from pathlib import Path
from typing import ClassVar

from intake.analysis.analyzer import ClinicalAnalyzer
from intake.analysis.factory import ClassificationCapabilityFactory
from intake.audit.events import AuditEvent
from intake.audit.logger import AuditLogger
from intake.compliance.checker import ComplianceChecker
from intake.config.settings import Settings
from intake.database.repositories.audit_repository import AuditRepository
from intake.database.repositories.result_repository import ResultRepository
from intake.database.repositories.submission_repository import SubmissionRepository
from intake.extraction.extractor import TextExtractor
from intake.extraction.factory import TextExtractorFactory
from intake.ingest.staging import StagingArea
from intake.logging.logger import Log
from intake.processor.exceptions import InvalidStateTransition
from intake.processor.models import (
    TERMINAL_STATES,
    DocumentSubmission,
    PipelineState,
    ProcessingResult,
)
from intake.processor.pipeline import PipelineContext, PipelineStep
from intake.processor.steps import AnalyzeStep, ComplianceCheckStep, ExtractStep, ScanStep
from intake.security.scanner import SecurityScanner


class Processor:
    """Drives one submission through the pipeline state machine.

    Pipeline: scan -> extract -> analyze -> compliance check -> persist.
    A failed scan ends the run in ``rejected``; every other stage degrades
    instead of failing. The staging file is released on both terminal states.
    """

    ALLOWED_TRANSITIONS: ClassVar[dict[PipelineState, frozenset[PipelineState]]] = {
        PipelineState.SUBMITTED: frozenset({PipelineState.SCANNING}),
        PipelineState.SCANNING: frozenset({PipelineState.REJECTED, PipelineState.EXTRACTING}),
        PipelineState.EXTRACTING: frozenset({PipelineState.ANALYZING}),
        PipelineState.ANALYZING: frozenset({PipelineState.COMPLIANCE_CHECKING}),
        PipelineState.COMPLIANCE_CHECKING: frozenset({PipelineState.COMPLETED}),
        PipelineState.REJECTED: frozenset(),
        PipelineState.COMPLETED: frozenset(),
    }

    def __init__(
        self,
        steps: list[PipelineStep],
        result_repo: ResultRepository,
        submission_repo: SubmissionRepository,
        staging: StagingArea,
        audit: AuditLogger,
    ) -> None:
        self._steps = steps
        self._result_repo = result_repo
        self._submission_repo = submission_repo
        self._staging = staging
        self._audit = audit

    def process(self, submission: DocumentSubmission) -> ProcessingResult:
        """Run the full pipeline for one submission and persist its result."""
        Log.info(f"Processing submission {submission.id}", filename=submission.original_filename)
        context = PipelineContext(
            submission=submission,
            result=ProcessingResult(id=uuid.uuid4().hex, submission_id=submission.id),
        )

        for step in self._steps:
            self.transition(context, step.state)
            step.run(context)
            if context.rejected:
                self.transition(context, PipelineState.REJECTED)
                break
        else:
            self.transition(context, PipelineState.COMPLETED)

        self._finish(context)
        return context.result

    @classmethod
    def transition(cls, context: PipelineContext, target: PipelineState) -> None:
        """Move *context* to *target*.

        Raises:
            InvalidStateTransition: if *target* is not reachable from the current state.
        """
        if target not in cls.ALLOWED_TRANSITIONS[context.state]:
            raise InvalidStateTransition(
                f"Submission {context.submission.id}: "
                f"{context.state.value} -> {target.value} is not allowed"
            )
        Log.debug(
            f"Submission {context.submission.id}: {context.state.value} -> {target.value}"
        )
        context.state = target
        context.result.status = target.value

    def _finish(self, context: PipelineContext) -> None:
        if context.state not in TERMINAL_STATES:
            raise InvalidStateTransition(
                f"Submission {context.submission.id} ended in non-terminal "
                f"state {context.state.value}"
            )
        submission = context.submission
        result = context.result

        self._result_repo.save(result)
        if context.state is PipelineState.COMPLETED:
            self._audit.record(
                submission.id,
                AuditEvent.COMPLETED,
                result_id=result.id,
                document_type=result.document_type,
                confidence=result.confidence,
                hipaa_compliant=result.hipaa_compliant,
            )
        self._submission_repo.mark_state(submission.id, context.state.value)
        release_staging(self._staging, self._audit, submission)
        Log.info(
            f"Submission {submission.id} finished as {context.state.value}",
            result_id=result.id,
        )


def release_staging(
    staging: StagingArea, audit: AuditLogger, submission: DocumentSubmission
) -> None:
    """Delete or retain the staging file and record where it went."""
    retained = staging.release(submission)
    audit.record(
        submission.id,
        AuditEvent.STAGING_RELEASED,
        disposition="retained" if retained is not None else "deleted",
    )


def build_processor(settings: Settings) -> Processor:
    """Build a fully wired processor from application settings."""
    staging = StagingArea(Path(settings.staging_dir), Path(settings.retained_dir))
    audit = AuditLogger(AuditRepository())
    scanner = SecurityScanner(staging, audit, settings.max_upload_bytes)
    extractor = TextExtractor(TextExtractorFactory.create_strategies(settings), staging, audit)
    analyzer = ClinicalAnalyzer(
        ClassificationCapabilityFactory.create(settings),
        audit,
        settings.capability_timeout_seconds,
    )
    steps: list[PipelineStep] = [
        ScanStep(scanner),
        ExtractStep(extractor),
        AnalyzeStep(analyzer),
        ComplianceCheckStep(ComplianceChecker(), audit),
    ]
    return Processor(
        steps=steps,
        result_repo=ResultRepository(),
        submission_repo=SubmissionRepository(settings.max_job_attempts),
        staging=staging,
        audit=audit,
    )
