from dataclasses import asdict
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from intake.database.connection import get_connection
from intake.processor.exceptions import SubmissionNotFoundError
from intake.processor.models import (
    ComplianceFlag,
    MedicalInfo,
    ProcessingResult,
    SecurityScanOutcome,
    VitalSigns,
)


class ResultRepository:
    """Database operations for the processing_results table."""

    def save(self, result: ProcessingResult) -> None:
        """Insert or replace the result for its submission."""
        medical_info = (
            Jsonb(asdict(result.medical_info)) if result.medical_info is not None else None
        )
        security_scan = asdict(result.security_scan) if result.security_scan else {}
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO processing_results
                (id, submission_id, status, extracted_text, document_type,
                 confidence, summary, key_data, medical_info, compliance_flags,
                 security_scan, extraction_degraded, analysis_degraded, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (submission_id) DO UPDATE SET
                    id = EXCLUDED.id,
                    status = EXCLUDED.status,
                    extracted_text = EXCLUDED.extracted_text,
                    document_type = EXCLUDED.document_type,
                    confidence = EXCLUDED.confidence,
                    summary = EXCLUDED.summary,
                    key_data = EXCLUDED.key_data,
                    medical_info = EXCLUDED.medical_info,
                    compliance_flags = EXCLUDED.compliance_flags,
                    security_scan = EXCLUDED.security_scan,
                    extraction_degraded = EXCLUDED.extraction_degraded,
                    analysis_degraded = EXCLUDED.analysis_degraded,
                    created_at = EXCLUDED.created_at
                """,
                (
                    result.id,
                    result.submission_id,
                    result.status,
                    result.extracted_text,
                    result.document_type,
                    result.confidence,
                    result.summary,
                    Jsonb(result.key_data),
                    medical_info,
                    Jsonb([flag.value for flag in result.compliance_flags]),
                    Jsonb(security_scan),
                    result.extraction_degraded,
                    result.analysis_degraded,
                    result.created_at,
                ),
            )
            conn.commit()

    def find_by_submission(self, submission_id: str) -> ProcessingResult:
        """Load the result for a submission.

        Raises:
            SubmissionNotFoundError: if the submission has no result.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT * FROM processing_results WHERE submission_id = %s",
                    (submission_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise SubmissionNotFoundError(f"No result for submission {submission_id}")
        return _to_result(row)


def _to_result(row: dict[str, Any]) -> ProcessingResult:
    scan = row["security_scan"] or {}
    return ProcessingResult(
        id=row["id"],
        submission_id=row["submission_id"],
        status=row["status"],
        extracted_text=row["extracted_text"],
        document_type=row["document_type"],
        confidence=float(row["confidence"]),
        summary=row["summary"],
        key_data=row["key_data"] or {},
        medical_info=_to_medical_info(row["medical_info"]),
        compliance_flags=[ComplianceFlag(flag) for flag in row["compliance_flags"] or []],
        security_scan=SecurityScanOutcome(
            passed=bool(scan.get("passed", False)),
            threats=list(scan.get("threats", [])),
        ),
        extraction_degraded=row["extraction_degraded"],
        analysis_degraded=row["analysis_degraded"],
        created_at=row["created_at"],
    )


def _to_medical_info(raw: dict[str, Any] | None) -> MedicalInfo | None:
    if raw is None:
        return None
    vitals = raw.get("vital_signs")
    return MedicalInfo(
        patient_name=raw.get("patient_name"),
        patient_id=raw.get("patient_id"),
        date_of_birth=raw.get("date_of_birth"),
        diagnoses=list(raw.get("diagnoses") or []),
        medications=list(raw.get("medications") or []),
        procedures=list(raw.get("procedures") or []),
        allergies=list(raw.get("allergies") or []),
        vital_signs=VitalSigns(**vitals) if vitals else None,
    )
