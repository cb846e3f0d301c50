from pathlib import Path

from intake.audit.logger import AuditLogger
from intake.config.settings import Settings
from intake.database.connection import apply_schema, close_pool, init_pool
from intake.database.repositories.audit_repository import AuditRepository
from intake.database.repositories.submission_repository import SubmissionRepository
from intake.ingest.staging import StagingArea
from intake.logging.logger import Log
from intake.processor.processor import build_processor
from intake.worker.job_runner import JobRunner
from intake.worker.worker import Worker


def main() -> None:
    """Entry point: initialize pool -> apply schema -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        apply_schema()
        processor = build_processor(settings)
        submission_repo = SubmissionRepository(settings.max_job_attempts)
        job_runner = JobRunner(
            processor,
            submission_repo,
            StagingArea(Path(settings.staging_dir), Path(settings.retained_dir)),
            AuditLogger(AuditRepository()),
            settings.max_job_attempts,
        )
        worker = Worker(submission_repo, job_runner, settings)
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
