from pathlib import Path
from unittest.mock import MagicMock

import pytest

from intake.audit.exceptions import AuditWriteError
from intake.audit.logger import AuditLogger
from intake.database.repositories.submission_repository import SubmissionRepository
from intake.ingest.exceptions import PayloadTooLarge, UnsupportedFormat
from intake.ingest.gateway import IngestGateway
from intake.ingest.staging import StagingArea
from tests.helpers import audit_events, audit_payloads


def _make_gateway(
    staging: StagingArea, audit: AuditLogger, max_upload_bytes: int = 1024
) -> tuple[IngestGateway, MagicMock]:
    repo = MagicMock(spec=SubmissionRepository)
    return IngestGateway(staging, repo, audit, max_upload_bytes), repo


def _staged_files(tmp_path: Path) -> list[Path]:
    root = tmp_path / "staging"
    return list(root.iterdir()) if root.exists() else []


class TestAccepted:
    def test_stages_file_under_submission_id(
        self, staging: StagingArea, audit: AuditLogger, tmp_path: Path
    ) -> None:
        gateway, _repo = _make_gateway(staging, audit)

        submission = gateway.submit(b"hello", "../../etc/passwd", "text/plain", "user-1")

        assert submission.staging_path == tmp_path / "staging" / submission.id
        assert submission.staging_path.read_bytes() == b"hello"
        assert submission.original_filename == "../../etc/passwd"

    def test_records_submission_row(self, staging: StagingArea, audit: AuditLogger) -> None:
        gateway, repo = _make_gateway(staging, audit)

        submission = gateway.submit(b"hello", "a.txt", "text/plain", "user-1")

        repo.insert.assert_called_once_with(submission)

    def test_emits_submitted_audit(
        self, staging: StagingArea, audit: AuditLogger, audit_store: MagicMock
    ) -> None:
        gateway, _repo = _make_gateway(staging, audit)

        submission = gateway.submit(b"hello", "a.txt", "text/plain", "user-1")

        assert audit_events(audit_store) == ["submitted"]
        entry = audit_store.append.call_args.args[0]
        assert entry.submission_id == submission.id
        assert entry.actor == "user-1"

    def test_normalizes_mime_parameters(self, staging: StagingArea, audit: AuditLogger) -> None:
        gateway, _repo = _make_gateway(staging, audit)

        submission = gateway.submit(b"hello", "a.txt", "Text/Plain; charset=utf-8", "user-1")

        assert submission.mime_type == "text/plain"

    def test_keeps_declared_size(self, staging: StagingArea, audit: AuditLogger) -> None:
        gateway, _repo = _make_gateway(staging, audit)

        submission = gateway.submit(b"hello", "a.txt", "text/plain", "user-1", declared_size=9)

        assert submission.size_bytes == 9

    def test_unique_ids(self, staging: StagingArea, audit: AuditLogger) -> None:
        gateway, _repo = _make_gateway(staging, audit)

        first = gateway.submit(b"a", "a.txt", "text/plain", "user-1")
        second = gateway.submit(b"a", "a.txt", "text/plain", "user-1")

        assert first.id != second.id


class TestRejected:
    def test_oversized_upload_raises_without_staging_write(
        self,
        staging: StagingArea,
        audit: AuditLogger,
        audit_store: MagicMock,
        tmp_path: Path,
    ) -> None:
        gateway, repo = _make_gateway(staging, audit, max_upload_bytes=10)

        with pytest.raises(PayloadTooLarge) as exc_info:
            gateway.submit(b"x" * 11, "big.pdf", "application/pdf", "user-1")

        assert exc_info.value.limit_bytes == 10
        assert _staged_files(tmp_path) == []
        repo.insert.assert_not_called()
        assert audit_events(audit_store) == ["rejected-ingress"]
        assert audit_payloads(audit_store, "rejected-ingress")[0]["reason"] == "payload-too-large"

    def test_declared_size_over_limit_rejected(
        self, staging: StagingArea, audit: AuditLogger, tmp_path: Path
    ) -> None:
        gateway, _repo = _make_gateway(staging, audit, max_upload_bytes=10)

        with pytest.raises(PayloadTooLarge):
            gateway.submit(b"tiny", "a.txt", "text/plain", "user-1", declared_size=5000)

        assert _staged_files(tmp_path) == []

    def test_unsupported_format_rejected(
        self,
        staging: StagingArea,
        audit: AuditLogger,
        audit_store: MagicMock,
        tmp_path: Path,
    ) -> None:
        gateway, repo = _make_gateway(staging, audit)

        with pytest.raises(UnsupportedFormat) as exc_info:
            gateway.submit(b"MZ", "setup.exe", "application/x-msdownload", "user-1")

        assert exc_info.value.mime_type == "application/x-msdownload"
        assert _staged_files(tmp_path) == []
        repo.insert.assert_not_called()
        assert audit_payloads(audit_store, "rejected-ingress")[0]["reason"] == "unsupported-format"

    @pytest.mark.parametrize(
        "mime_type",
        [
            "application/pdf",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/msword",
            "image/jpeg",
            "image/png",
            "image/tiff",
            "text/plain",
        ],
    )
    def test_allow_list(self, staging: StagingArea, audit: AuditLogger, mime_type: str) -> None:
        gateway, _repo = _make_gateway(staging, audit)
        assert gateway.submit(b"data", "f", mime_type, "user-1").mime_type == mime_type


class TestRecordingFailure:
    def test_insert_failure_discards_staged_file(
        self, staging: StagingArea, audit: AuditLogger, tmp_path: Path
    ) -> None:
        gateway, repo = _make_gateway(staging, audit)
        repo.insert.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError, match="db down"):
            gateway.submit(b"hello", "a.txt", "text/plain", "user-1")

        assert _staged_files(tmp_path) == []

    def test_audit_failure_discards_staged_file(
        self,
        staging: StagingArea,
        audit: AuditLogger,
        audit_store: MagicMock,
        tmp_path: Path,
    ) -> None:
        gateway, _repo = _make_gateway(staging, audit)
        audit_store.append.side_effect = RuntimeError("audit store down")

        with pytest.raises(AuditWriteError):
            gateway.submit(b"hello", "a.txt", "text/plain", "user-1")

        assert _staged_files(tmp_path) == []
