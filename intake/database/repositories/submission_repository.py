from pathlib import Path
from typing import Any

import psycopg
from psycopg.rows import dict_row

from intake.database.connection import get_connection
from intake.database.models import SubmissionJob
from intake.processor.exceptions import SubmissionNotFoundError
from intake.processor.models import DocumentSubmission

_COLUMNS = """
    id, original_filename, mime_type, size_bytes, staging_path,
    submitted_by, submitted_at, export_pending, status, attempts,
    error_message, locked_at
"""


class SubmissionRepository:
    """Database operations for the document_submissions table."""

    def __init__(self, max_attempts: int) -> None:
        self._max_attempts = max_attempts

    def insert(self, submission: DocumentSubmission) -> None:
        """Record a newly staged submission with status 'submitted'."""
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO document_submissions
                (id, original_filename, mime_type, size_bytes, staging_path,
                 submitted_by, submitted_at, export_pending, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, 'submitted')
                """,
                (
                    submission.id,
                    submission.original_filename,
                    submission.mime_type,
                    submission.size_bytes,
                    str(submission.staging_path),
                    submission.submitted_by,
                    submission.submitted_at,
                    submission.export_pending,
                ),
            )
            conn.commit()

    def claim_next(self, conn: psycopg.Connection[Any]) -> SubmissionJob | None:
        """Claim the oldest waiting submission using SELECT FOR UPDATE SKIP LOCKED."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM document_submissions
                WHERE status = 'submitted'
                  AND attempts < %s
                ORDER BY submitted_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (self._max_attempts,),
            )
            row = cur.fetchone()

        if row is None:
            conn.rollback()
            return None

        conn.execute(
            """
            UPDATE document_submissions
            SET status = 'processing', locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (row["id"],),
        )
        conn.commit()
        row["status"] = "processing"
        return _to_job(row)

    def mark_state(self, submission_id: str, state: str) -> None:
        """Persist the terminal pipeline state (completed / rejected)."""
        with get_connection() as conn:
            cur = conn.execute(
                """
                UPDATE document_submissions
                SET status = %s, locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (state, submission_id),
            )
            if cur.rowcount == 0:
                raise SubmissionNotFoundError(f"Submission {submission_id} not found")
            conn.commit()

    def mark_failed(self, submission_id: str, error: str) -> None:
        """Mark a submission as permanently failed."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_submissions
                SET status = 'failed', error_message = %s,
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (error, submission_id),
            )
            conn.commit()

    def increment_attempts(self, submission_id: str) -> None:
        """Increment attempt count and return the submission to the queue."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_submissions
                SET attempts = attempts + 1, status = 'submitted',
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (submission_id,),
            )
            conn.commit()

    def find_by_id(self, submission_id: str) -> SubmissionJob:
        """Find a submission by ID.

        Raises:
            SubmissionNotFoundError: if no submission with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM document_submissions WHERE id = %s",
                    (submission_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise SubmissionNotFoundError(f"Submission {submission_id} not found")
        return _to_job(row)


def _to_job(row: dict[str, Any]) -> SubmissionJob:
    submission = DocumentSubmission(
        id=row["id"],
        original_filename=row["original_filename"],
        mime_type=row["mime_type"],
        size_bytes=row["size_bytes"],
        staging_path=Path(row["staging_path"]),
        submitted_by=row["submitted_by"],
        submitted_at=row["submitted_at"],
        export_pending=row["export_pending"],
    )
    return SubmissionJob(
        submission=submission,
        status=row["status"],
        attempts=row["attempts"],
        error_message=row.get("error_message"),
        locked_at=row.get("locked_at"),
    )
