import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor

from intake.config.settings import Settings
from intake.database.connection import get_connection
from intake.database.models import SubmissionJob
from intake.database.repositories.submission_repository import SubmissionRepository
from intake.logging.logger import Log
from intake.worker.job_runner import JobRunner


class Worker:
    """Poll loop: wait for a free slot -> claim -> dispatch to the pool.

    At most ``worker_pool_size`` submissions run at once; each one runs its
    stages sequentially on a single pool thread.
    """

    def __init__(
        self,
        submission_repo: SubmissionRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._submission_repo = submission_repo
        self._job_runner = job_runner
        self._pool_size = max(1, settings.worker_pool_size)
        self._poll_interval = settings.job_poll_interval_seconds
        self._slots = threading.BoundedSemaphore(self._pool_size)

    def run(self, max_jobs: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_jobs is set, stop after dispatching that many submissions and
        wait for them to finish (for testing).
        """
        Log.info("Worker started, polling for submissions", pool_size=self._pool_size)
        dispatched = 0
        with ThreadPoolExecutor(
            max_workers=self._pool_size, thread_name_prefix="intake-worker"
        ) as executor:
            try:
                while max_jobs is None or dispatched < max_jobs:
                    self._slots.acquire()
                    job = self._try_claim()
                    if job is None:
                        self._slots.release()
                        Log.debug("No submissions waiting, sleeping")
                        time.sleep(self._poll_interval)
                        continue
                    future = executor.submit(self._job_runner.run, job)
                    future.add_done_callback(self._on_done)
                    dispatched += 1
            except KeyboardInterrupt:
                Log.info("Worker shutting down gracefully, waiting for running submissions")

    def _on_done(self, future: Future) -> None:
        self._slots.release()
        exc = future.exception()
        if exc is not None:
            Log.error(f"Job runner crashed: {exc!r}")

    def _try_claim(self) -> SubmissionJob | None:
        """Attempt to claim the next waiting submission. Gracefully handle DB errors."""
        try:
            with get_connection() as conn:
                return self._submission_repo.claim_next(conn)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
