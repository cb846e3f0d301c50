import threading
from unittest.mock import MagicMock

from intake.analysis.analyzer import (
    FALLBACK_CONFIDENCE,
    FALLBACK_SUMMARY,
    ClinicalAnalyzer,
)
from intake.audit.logger import AuditLogger
from intake.capabilities.exceptions import (
    CapabilityUnavailable,
    MalformedCapabilityResponse,
)
from intake.processor.models import DocumentClassification, MedicalInfo
from tests.helpers import StubCapability, audit_events, audit_payloads


def _analyzer(capability: object, audit: AuditLogger, timeout: float = 2.0) -> ClinicalAnalyzer:
    return ClinicalAnalyzer(capability, audit, timeout_seconds=timeout)  # type: ignore[arg-type]


class TestSuccessfulAnalysis:
    def test_uses_capability_results(
        self, audit: AuditLogger, audit_store: MagicMock
    ) -> None:
        info = MedicalInfo(patient_name="Jane Roe")
        outcome = _analyzer(StubCapability(medical_info=info), audit).analyze(
            "CBC results", "cbc.pdf", submission_id="s1"
        )

        assert outcome.document_type == "lab_report"
        assert outcome.confidence == 0.92
        assert outcome.medical_info == info
        assert outcome.degraded is False
        assert audit_events(audit_store) == ["analysis-started", "analysis-completed"]

    def test_calls_both_capability_operations(self, audit: AuditLogger) -> None:
        capability = StubCapability()
        _analyzer(capability, audit).analyze("text", "a.txt", submission_id="s1")
        assert sorted(capability.calls) == ["classify", "extract_medical_entities"]

    def test_runs_calls_concurrently(self, audit: AuditLogger) -> None:
        barrier = threading.Barrier(2, timeout=2)

        class _Rendezvous(StubCapability):
            def classify(self, text: str, filename: str) -> DocumentClassification:
                barrier.wait()
                return super().classify(text, filename)

            def extract_medical_entities(self, text: str) -> MedicalInfo:
                barrier.wait()
                return super().extract_medical_entities(text)

        outcome = _analyzer(_Rendezvous(), audit).analyze("text", "a.txt", submission_id="s1")

        assert outcome.degraded is False


class TestDegradedAnalysis:
    def test_malformed_classification_falls_back(
        self, audit: AuditLogger, audit_store: MagicMock
    ) -> None:
        capability = StubCapability(classification=MalformedCapabilityResponse("bad json"))

        outcome = _analyzer(capability, audit).analyze("text", "a.txt", submission_id="s1")

        assert outcome.document_type == "Unknown"
        assert outcome.confidence == FALLBACK_CONFIDENCE
        assert outcome.summary == FALLBACK_SUMMARY
        assert outcome.key_data == {}
        assert outcome.degraded is True
        assert audit_events(audit_store) == ["analysis-started", "analysis-degraded"]
        reasons = audit_payloads(audit_store, "analysis-degraded")[0]["reasons"]
        assert any("classification failed" in reason for reason in reasons)

    def test_failed_medical_extraction_gives_none(self, audit: AuditLogger) -> None:
        capability = StubCapability(medical_info=CapabilityUnavailable("down"))

        outcome = _analyzer(capability, audit).analyze("text", "a.txt", submission_id="s1")

        assert outcome.document_type == "lab_report"
        assert outcome.medical_info is None
        assert outcome.degraded is True

    def test_unexpected_exception_is_contained(self, audit: AuditLogger) -> None:
        capability = StubCapability(classification=KeyError("choices"))

        outcome = _analyzer(capability, audit).analyze("text", "a.txt", submission_id="s1")

        assert outcome.document_type == "Unknown"
        assert outcome.degraded is True

    def test_timeout_falls_back(self, audit: AuditLogger) -> None:
        release = threading.Event()

        class _Slow(StubCapability):
            def classify(self, text: str, filename: str) -> DocumentClassification:
                release.wait(5)
                return super().classify(text, filename)

        try:
            outcome = _analyzer(_Slow(), audit, timeout=0.05).analyze(
                "text", "a.txt", submission_id="s1"
            )
        finally:
            release.set()

        assert outcome.confidence == FALLBACK_CONFIDENCE
        assert any("timed out" in reason for reason in outcome.reasons)

    def test_blank_text_skips_capability(self, audit: AuditLogger) -> None:
        capability = StubCapability()

        outcome = _analyzer(capability, audit).analyze("   \n", "a.txt", submission_id="s1")

        assert capability.calls == []
        assert outcome.document_type == "Unknown"
        assert outcome.confidence == FALLBACK_CONFIDENCE
        assert outcome.degraded is True

    def test_degraded_extraction_caps_confidence(self, audit: AuditLogger) -> None:
        outcome = _analyzer(StubCapability(), audit).analyze(
            "[Text extraction unavailable: a.pdf (corrupt)]",
            "a.pdf",
            submission_id="s1",
            extraction_degraded=True,
        )

        assert outcome.confidence == 0.3
        assert outcome.degraded is False


class TestConfidenceBound:
    def test_out_of_range_confidence_is_clamped(self, audit: AuditLogger) -> None:
        classification = DocumentClassification(
            document_type="referral", confidence=4.2, summary="", key_data={}
        )

        outcome = _analyzer(StubCapability(classification=classification), audit).analyze(
            "text", "a.txt", submission_id="s1"
        )

        assert 0.0 <= outcome.confidence <= 1.0
