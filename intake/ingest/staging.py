import shutil
from pathlib import Path

from intake.processor.exceptions import StagedFileMissingError
from intake.processor.models import DocumentSubmission


def staged_file_path(staging_root: Path, submission_id: str) -> Path:
    """Build path to a staged file: {staging_root}/{submission_id}"""
    return staging_root / submission_id


class StagingArea:
    """Owns the per-submission staging files.

    Files are named by submission id only, never by the uploaded filename.
    Each file has exactly one owner, so concurrent runs need no locking.
    """

    def __init__(self, staging_root: Path, retained_root: Path) -> None:
        self._staging_root = staging_root
        self._retained_root = retained_root

    def write(self, submission_id: str, data: bytes) -> Path:
        self._staging_root.mkdir(parents=True, exist_ok=True)
        path = staged_file_path(self._staging_root, submission_id)
        with path.open("xb") as fh:
            fh.write(data)
        return path

    def load(self, submission: DocumentSubmission) -> bytes:
        """Read staged bytes.

        Raises:
            StagedFileMissingError: if the staging file does not exist.
        """
        path = submission.staging_path
        if not path.exists():
            raise StagedFileMissingError(f"Staged file not found: {path}")
        return path.read_bytes()

    def size_of(self, submission: DocumentSubmission) -> int:
        path = submission.staging_path
        if not path.exists():
            raise StagedFileMissingError(f"Staged file not found: {path}")
        return path.stat().st_size

    def discard(self, submission_id: str) -> None:
        staged_file_path(self._staging_root, submission_id).unlink(missing_ok=True)

    def release(self, submission: DocumentSubmission) -> Path | None:
        """Remove the staging file; move it to the retained area when export is pending.

        Returns the retained path, or None when the file was deleted.
        """
        path = submission.staging_path
        if not path.exists():
            return None
        if submission.export_pending:
            self._retained_root.mkdir(parents=True, exist_ok=True)
            target = self.retained_path(submission.id)
            shutil.move(str(path), target)
            return target
        path.unlink()
        return None

    def retained_path(self, submission_id: str) -> Path:
        return staged_file_path(self._retained_root, submission_id)

    def locate_original(self, submission: DocumentSubmission) -> Path | None:
        """Return the staged or retained copy of the upload, whichever exists."""
        for path in (submission.staging_path, self.retained_path(submission.id)):
            if path.exists():
                return path
        return None
