"""Clinical analysis stage: classification and medical-entity extraction."""

from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from intake.analysis.capability import BaseClassificationCapability
from intake.audit.events import AuditEvent
from intake.audit.logger import AuditLogger
from intake.capabilities.exceptions import CapabilityError, CapabilityTimeout
from intake.logging.logger import Log
from intake.processor.models import DocumentClassification, MedicalInfo, clamp_confidence

FALLBACK_CONFIDENCE = 0.1
FALLBACK_DOCUMENT_TYPE = "Unknown"
FALLBACK_SUMMARY = "AI analysis failed"
DEGRADED_EXTRACTION_CONFIDENCE_CAP = 0.3


def fallback_classification() -> DocumentClassification:
    return DocumentClassification(
        document_type=FALLBACK_DOCUMENT_TYPE,
        confidence=FALLBACK_CONFIDENCE,
        summary=FALLBACK_SUMMARY,
        key_data={},
    )


@dataclass(frozen=True)
class AnalysisOutcome:
    document_type: str
    confidence: float
    summary: str
    key_data: dict[str, object] = field(default_factory=dict)
    medical_info: MedicalInfo | None = None
    degraded: bool = False
    reasons: list[str] = field(default_factory=list)


class ClinicalAnalyzer:
    """Runs both capability calls concurrently and never propagates their errors.

    A failed classification falls back to a low-confidence "Unknown"
    result; a failed medical extraction leaves ``medical_info`` empty.
    """

    def __init__(
        self,
        capability: BaseClassificationCapability,
        audit: AuditLogger,
        timeout_seconds: float,
    ) -> None:
        self._capability = capability
        self._audit = audit
        self._timeout_seconds = timeout_seconds

    def analyze(
        self,
        text: str,
        filename: str,
        *,
        submission_id: str,
        extraction_degraded: bool = False,
    ) -> AnalysisOutcome:
        self._audit.record(
            submission_id,
            AuditEvent.ANALYSIS_STARTED,
            characters=len(text),
            extraction_degraded=extraction_degraded,
        )

        reasons: list[str] = []
        if not text.strip():
            classification = fallback_classification()
            medical_info = None
            reasons.append("no extractable text")
        else:
            classification, medical_info = self._run_capability(text, filename, reasons)

        confidence = clamp_confidence(classification.confidence)
        if extraction_degraded and confidence > DEGRADED_EXTRACTION_CONFIDENCE_CAP:
            confidence = DEGRADED_EXTRACTION_CONFIDENCE_CAP

        outcome = AnalysisOutcome(
            document_type=classification.document_type,
            confidence=confidence,
            summary=classification.summary,
            key_data=dict(classification.key_data),
            medical_info=medical_info,
            degraded=bool(reasons),
            reasons=reasons,
        )

        if outcome.degraded:
            Log.warning(
                f"Degraded analysis for submission {submission_id}",
                reasons="; ".join(reasons),
            )
            self._audit.record(
                submission_id,
                AuditEvent.ANALYSIS_DEGRADED,
                document_type=outcome.document_type,
                confidence=outcome.confidence,
                reasons=list(reasons),
            )
        else:
            self._audit.record(
                submission_id,
                AuditEvent.ANALYSIS_COMPLETED,
                document_type=outcome.document_type,
                confidence=outcome.confidence,
            )
        return outcome

    def _run_capability(
        self, text: str, filename: str, reasons: list[str]
    ) -> tuple[DocumentClassification, MedicalInfo | None]:
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="analysis")
        try:
            classify_future = executor.submit(self._capability.classify, text, filename)
            medical_future = executor.submit(self._capability.extract_medical_entities, text)
            wait([classify_future, medical_future], timeout=self._timeout_seconds)

            try:
                classification = self._result_of(classify_future, "classification")
            except CapabilityError as exc:
                reasons.append(f"classification failed: {exc}")
                classification = fallback_classification()

            medical_info: MedicalInfo | None
            try:
                medical_info = self._result_of(medical_future, "medical extraction")
            except CapabilityError as exc:
                reasons.append(f"medical extraction failed: {exc}")
                medical_info = None
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return classification, medical_info

    def _result_of(self, future: Future, label: str):
        """Return a finished call's result, mapping timeouts and crashes to CapabilityError."""
        if not future.done():
            future.cancel()
            raise CapabilityTimeout(f"{label} timed out after {self._timeout_seconds}s")
        exc = future.exception()
        if exc is None:
            return future.result()
        if isinstance(exc, CapabilityError):
            raise exc
        Log.error(f"Unexpected {label} error: {exc!r}")
        raise CapabilityError(f"unexpected {type(exc).__name__}: {exc}") from exc
