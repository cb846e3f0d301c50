from intake.audit.events import AuditEvent
from intake.audit.exceptions import AuditWriteError
from intake.audit.logger import AuditLogger
from intake.database.models import SubmissionJob
from intake.database.repositories.submission_repository import SubmissionRepository
from intake.ingest.staging import StagingArea
from intake.logging.logger import Log
from intake.processor.processor import Processor, release_staging


class JobRunner:
    """Run one claimed submission, catch exceptions, and apply retry logic."""

    def __init__(
        self,
        processor: Processor,
        submission_repo: SubmissionRepository,
        staging: StagingArea,
        audit: AuditLogger,
        max_attempts: int,
    ) -> None:
        self._processor = processor
        self._submission_repo = submission_repo
        self._staging = staging
        self._audit = audit
        self._max_attempts = max_attempts

    def run(self, job: SubmissionJob) -> None:
        """Execute a single submission with error handling."""
        submission_id = job.submission.id
        Log.info(f"Running submission {submission_id} (attempt {job.attempts + 1})")
        try:
            result = self._processor.process(job.submission)
        except Exception as exc:
            self._handle_failure(job, exc)
        else:
            Log.info(f"Submission {submission_id} done", status=result.status)

    def _handle_failure(self, job: SubmissionJob, exc: Exception) -> None:
        """Increment attempts; mark failed and release staging once attempts run out."""
        submission = job.submission
        attempt = job.attempts + 1
        final = attempt >= self._max_attempts
        Log.error(f"Submission {submission.id} failed: {exc}", attempt=attempt)

        try:
            self._audit.record(
                submission.id,
                AuditEvent.PROCESSING_FAILED,
                attempt=attempt,
                final=final,
                error=f"{type(exc).__name__}: {exc}",
            )
        except AuditWriteError:
            Log.exception(f"Could not audit failure of submission {submission.id}")

        if not final:
            self._submission_repo.increment_attempts(submission.id)
            Log.warning(f"Submission {submission.id} will be retried (attempt {attempt})")
            return

        self._submission_repo.mark_failed(submission.id, str(exc))
        Log.error(f"Submission {submission.id} permanently failed after {attempt} attempts")
        try:
            release_staging(self._staging, self._audit, submission)
        except (OSError, AuditWriteError):
            Log.exception(f"Could not release staging for submission {submission.id}")
