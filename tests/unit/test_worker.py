from pathlib import Path
from unittest.mock import MagicMock, patch

from intake.database.models import SubmissionJob
from intake.processor.models import DocumentSubmission
from intake.worker.worker import Worker


def _make_worker(pool_size: int = 1) -> tuple[Worker, MagicMock, MagicMock]:
    """Create a Worker with mocked dependencies."""
    mock_repo = MagicMock()
    mock_runner = MagicMock()
    settings = MagicMock(worker_pool_size=pool_size, job_poll_interval_seconds=1)
    worker = Worker(mock_repo, mock_runner, settings)
    return worker, mock_repo, mock_runner


def _make_job(submission_id: str = "sub-1") -> SubmissionJob:
    submission = DocumentSubmission(
        id=submission_id,
        original_filename="referral.txt",
        mime_type="text/plain",
        size_bytes=10,
        staging_path=Path("/tmp/staging") / submission_id,
        submitted_by="user-7",
    )
    return SubmissionJob(submission=submission, status="processing", attempts=0)


class TestWorkerDispatch:
    def test_dispatches_job_to_runner(self) -> None:
        worker, _repo, mock_runner = _make_worker()
        job = _make_job()

        with patch.object(worker, "_try_claim", side_effect=[job, KeyboardInterrupt]):
            worker.run()

        mock_runner.run.assert_called_once_with(job)

    def test_dispatches_multiple_jobs(self) -> None:
        worker, _repo, mock_runner = _make_worker(pool_size=2)

        with patch.object(
            worker,
            "_try_claim",
            side_effect=[_make_job("sub-1"), _make_job("sub-2"), KeyboardInterrupt],
        ):
            worker.run()

        assert mock_runner.run.call_count == 2

    def test_stops_after_max_jobs(self) -> None:
        worker, _repo, mock_runner = _make_worker()

        with patch.object(worker, "_try_claim", side_effect=[_make_job("sub-1")]):
            worker.run(max_jobs=1)

        assert mock_runner.run.call_count == 1

    def test_runner_crash_frees_slot(self) -> None:
        worker, _repo, mock_runner = _make_worker()
        mock_runner.run.side_effect = [RuntimeError("boom"), None]

        with patch.object(
            worker, "_try_claim", side_effect=[_make_job("sub-1"), _make_job("sub-2")]
        ):
            worker.run(max_jobs=2)

        assert mock_runner.run.call_count == 2


class TestWorkerSleep:
    def test_sleeps_when_no_job(self) -> None:
        worker, _repo, _runner = _make_worker()

        with (
            patch.object(worker, "_try_claim", side_effect=[None, KeyboardInterrupt]),
            patch("intake.worker.worker.time.sleep") as mock_sleep,
        ):
            worker.run()

        mock_sleep.assert_called_once_with(1)


class TestWorkerClaim:
    def test_database_error_returns_none(self) -> None:
        worker, _repo, _runner = _make_worker()

        with patch("intake.worker.worker.get_connection", side_effect=OSError("db down")):
            assert worker._try_claim() is None

    def test_claims_through_repository(self) -> None:
        worker, mock_repo, _runner = _make_worker()
        job = _make_job()
        mock_repo.claim_next.return_value = job
        conn = MagicMock()

        with patch("intake.worker.worker.get_connection") as mock_get_connection:
            mock_get_connection.return_value.__enter__.return_value = conn
            assert worker._try_claim() is job

        mock_repo.claim_next.assert_called_once_with(conn)


class TestWorkerShutdown:
    def test_handles_keyboard_interrupt(self) -> None:
        worker, _repo, _runner = _make_worker()

        with patch.object(worker, "_try_claim", side_effect=KeyboardInterrupt):
            worker.run()  # Should not raise
