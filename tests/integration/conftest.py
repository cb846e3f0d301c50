import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from intake.config.settings import Settings
from intake.database.connection import apply_schema, close_pool, get_connection, init_pool
from intake.database.repositories.submission_repository import SubmissionRepository
from intake.processor.models import DocumentSubmission

_TABLES = "audit_entries, transmission_records, processing_results, document_submissions"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "intake_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        apply_schema()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at one.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        conn.execute(f"TRUNCATE {_TABLES}")
        conn.commit()
        yield conn


@pytest.fixture
def seed_submission(
    db_conn: psycopg.Connection[Any], tmp_path: Path
) -> DocumentSubmission:
    path = tmp_path / "sub-int-1"
    path.write_bytes(b"SSN: 123-45-6789")
    submission = DocumentSubmission(
        id="sub-int-1",
        original_filename="labs.txt",
        mime_type="text/plain",
        size_bytes=16,
        staging_path=path,
        submitted_by="user-7",
    )
    SubmissionRepository(max_attempts=3).insert(submission)
    return submission
